import json
import shutil
import struct
import sys
from pathlib import Path
from urllib.parse import urlencode

import pytest
from starlette.requests import Request

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))


def make_request(query=None, headers=None, client=("198.51.100.7", 443)):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": urlencode(query or [], doseq=True).encode(),
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


@pytest.fixture
def base_dir(tmp_path):
    """Throwaway deployment: templates, language list and three installed locales."""
    shutil.copytree(ROOT / "public", tmp_path / "public")
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "langs").write_text(
        json.dumps([
            {"code": "de", "name": "German"},
            {"code": "fa", "name": "Persian"},
            {"code": "kw", "name": "Cornish"},
        ]),
        encoding="utf-8",
    )
    for code in ("de", "fa", "kw", "xx"):
        (tmp_path / "locale" / code / "LC_MESSAGES").mkdir(parents=True)
    return tmp_path


def write_mo(path, messages):
    """Write a minimal GNU .mo catalog for `messages` (msgid -> msgstr)."""
    catalog = {"": "Content-Type: text/plain; charset=UTF-8\n"}
    catalog.update(messages)
    keys = sorted(catalog)
    ids = [k.encode("utf-8") for k in keys]
    strs = [catalog[k].encode("utf-8") for k in keys]

    header_size = 7 * 4
    table_size = len(keys) * 8
    ids_offset = header_size + 2 * table_size
    strs_offset = ids_offset + sum(len(s) + 1 for s in ids)

    orig_table, trans_table = [], []
    offset = ids_offset
    for s in ids:
        orig_table += [len(s), offset]
        offset += len(s) + 1
    offset = strs_offset
    for s in strs:
        trans_table += [len(s), offset]
        offset += len(s) + 1

    data = struct.pack(
        "<7I", 0x950412DE, 0, len(keys), header_size, header_size + table_size, 0, 0
    )
    data += struct.pack(f"<{len(orig_table)}I", *orig_table)
    data += struct.pack(f"<{len(trans_table)}I", *trans_table)
    data += b"".join(s + b"\0" for s in ids)
    data += b"".join(s + b"\0" for s in strs)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
