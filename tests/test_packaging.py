from pathlib import Path


ROOT = Path(__file__).resolve().parent.parent


def _project_field(name):
    for line in (ROOT / 'pyproject.toml').read_text(encoding='utf-8').splitlines():
        key, sep, value = line.partition('=')
        if sep and key.strip() == name:
            return value.strip().strip('"')
    return None


def test_readme_is_a_user_facing_document():
    readme = _project_field('readme')

    assert readme == 'README.md'
    text = (ROOT / readme).read_text(encoding='utf-8')
    assert text.startswith('# freebody')
    assert 'pip install' in text
