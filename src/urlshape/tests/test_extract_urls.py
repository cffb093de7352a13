from ..common import extract_urls, with_scheme


def test_extract_simple() -> None:
    lines = """
 Got a 404 on [the profile page](
 https://example.com/users/42/profile) again.
""".strip()
    assert set(extract_urls(lines)) == {'https://example.com/users/42/profile'}


def test_extract_log() -> None:
    text = '''
[12/Oct/2024:10:00:01] "GET https://example.com/users/1 HTTP/1.1" 200
[12/Oct/2024:10:00:02] "GET https://example.com/users/2?tab=posts HTTP/1.1" 200
    '''
    assert set(extract_urls(text)) == {
        'https://example.com/users/1',
        'https://example.com/users/2?tab=posts',
    }


def test_extract_md() -> None:
    lines = '''
See [docs](https://docs.example.com/api/v1/items/), [github](https://github.com/example/repo), perhaps it could be useful!
    '''
    assert set(extract_urls(lines, syntax='md')) == {
        'https://docs.example.com/api/v1/items/',
        'https://github.com/example/repo',
    }


def test_extract_schemeless() -> None:
    lines = '''
python.org/one.html ?? https://python.org/two.html some extra text

    whatever.org
    '''
    res = extract_urls(lines)
    assert set(res) == {
        'python.org/one.html',
        'https://python.org/two.html',
        'whatever.org',
    }
    assert {with_scheme(u) for u in res} == {
        'http://python.org/one.html',
        'https://python.org/two.html',
        'http://whatever.org',
    }
