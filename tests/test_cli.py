from io import BytesIO

from gridfs_stream.stream.__main__ import main, run

def test_put_and_cat(wrapper, base_url, tmp_path):
    local = tmp_path / "hello.txt"
    local.write_bytes(b"Hello, World!")
    url = f"{base_url}/fs/hello.txt"

    assert run(wrapper, 'put', [url, str(local)]) == 0

    out = BytesIO()
    assert run(wrapper, 'cat', [url], out=out) == 0
    assert out.getvalue() == b"Hello, World!"

def test_mv_touch_stat_rm(wrapper, base_url):
    url = f"{base_url}/fs/a.txt"
    new_url = f"{base_url}/fs/b.txt"

    assert run(wrapper, 'touch', [url, '10', '20']) == 0
    assert run(wrapper, 'mv', [url, new_url]) == 0
    assert run(wrapper, 'mv', [url, new_url]) == 1

    out = BytesIO()
    assert run(wrapper, 'stat', [new_url], out=out) == 0
    assert b"st_size: 0" in out.getvalue()

    assert run(wrapper, 'rm', [new_url]) == 0
    assert run(wrapper, 'rm', [new_url]) == 1
    assert run(wrapper, 'stat', [new_url], out=BytesIO()) == 1

def test_usage_errors(capsys):
    assert main([]) == 2
    assert main(['frobnicate', 'gridfs://localhost/db/fs/a']) == 2
    assert main(['cat']) == 2
    assert "Usage" in capsys.readouterr().out
