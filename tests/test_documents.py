import random

import pytest

from hardstrings.core.documents import FileDocumentSource, apply_replacements
from hardstrings.core.exceptions import EditConflictError, ParseError


def test_replacements_use_original_offsets():
    text = "say 'Hello' and 'Bye'"
    edits = [(4, 11, "t('hello')"), (16, 21, "t('bye')")]
    assert apply_replacements(text, edits) == "say t('hello') and t('bye')"
    # Order of the edit list does not matter
    assert apply_replacements(text, list(reversed(edits))) == "say t('hello') and t('bye')"


def test_adjacent_edits_are_allowed():
    assert apply_replacements("abcd", [(0, 2, "X"), (2, 4, "Y")]) == "XY"


def test_overlapping_edits_are_rejected():
    with pytest.raises(EditConflictError):
        apply_replacements("abcdef", [(0, 3, "X"), (2, 5, "Y")])


def test_out_of_range_edit_is_rejected():
    with pytest.raises(EditConflictError):
        apply_replacements("abc", [(1, 10, "X")])


def test_file_round_trip_keeps_line_endings(tmp_path):
    path = tmp_path / "main.js"
    path.write_bytes(b"const a = 'Hello world'\r\nconst b = 1\r\n")
    source = FileDocumentSource()

    document = source.open_document(path)
    assert document.language_id == "javascript"
    assert document.encoding == "utf-8"

    start = document.text.index("'Hello world'")
    source.apply_edits(document, [(start, start + len("'Hello world'"), "t('hello-world')")])
    source.save_document(document)

    assert path.read_bytes() == b"const a = t('hello-world')\r\nconst b = 1\r\n"


def test_bom_is_preserved(tmp_path):
    path = tmp_path / "App.vue"
    path.write_bytes(b"\xef\xbb\xbf<p>Hi there</p>")
    source = FileDocumentSource()
    document = source.open_document(path)
    assert document.text == "<p>Hi there</p>"
    source.save_document(document)
    assert path.read_bytes().startswith(b"\xef\xbb\xbf<p>")


def test_binary_file_is_rejected(tmp_path):
    path = tmp_path / "logo.js"
    path.write_bytes(b"\x89PNG\x00\x00\x01")
    with pytest.raises(ParseError):
        FileDocumentSource().open_document(path)


def _random_edits(rng, text):
    cuts = sorted(rng.sample(range(len(text) + 1), rng.randint(1, 6) * 2))
    edits = []
    for start, end in zip(cuts[::2], cuts[1::2]):
        replacement = "".join(rng.choice("xyz'\n") for _ in range(rng.randint(0, 8)))
        edits.append((start, end, replacement))
    rng.shuffle(edits)
    return edits


@pytest.mark.parametrize("seed", range(25))
def test_one_pass_matches_sequential_right_to_left(seed):
    rng = random.Random(seed)
    text = "".join(rng.choice("abcdef \n") for _ in range(rng.randint(12, 80)))
    edits = _random_edits(rng, text)

    expected = text
    for start, end, replacement in sorted(edits, key=lambda e: e[0], reverse=True):
        expected = expected[:start] + replacement + expected[end:]

    pieces, cursor = [], 0
    for start, end, replacement in sorted(edits, key=lambda e: e[0]):
        pieces.append(text[cursor:start])
        pieces.append(replacement)
        cursor = end
    pieces.append(text[cursor:])

    assert apply_replacements(text, edits) == expected == "".join(pieces)
