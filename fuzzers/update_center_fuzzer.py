import sys

import atheris

with atheris.instrument_imports():
    from pluginhealth.collectors.update_center import parse_update_center, plugin_from_entry


def TestOneInput(data: bytes) -> None:
    s = data.decode("utf-8", errors="ignore")

    # Malformed manifests must surface as RuntimeError, nothing else.
    try:
        uc = parse_update_center(s, source="<fuzz>")
    except RuntimeError:
        return

    for entry in uc.plugin_entries():
        p = plugin_from_entry(entry)
        _ = (p.name, p.scm, p.release_timestamp)
        if isinstance(p.name, str):
            uc.deprecation_url(p.name)


def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
