import pytest

from opskit.strutil import (
    DIGITS,
    LETTERS,
    base64_decode,
    base64_encode,
    dangerous,
    ids_int64,
    ids_string,
    is_identifier,
    is_ip,
    is_mail,
    is_match,
    is_phone,
    keys_of_map,
    map_to_list,
    md5,
    parse_comma,
    parse_comma_trim,
    parse_lines,
    rand_digits,
    rand_letters,
    to_en_symbol,
    trim_string_slice,
)


@pytest.mark.parametrize("text", ["", "hello", "héllo wörld", "a+b/c=="])
def test_base64_round_trip(text):
    assert base64_decode(base64_encode(text)) == text


def test_base64_encode_empty():
    assert base64_encode("") == ""


def test_base64_decode_rejects_garbage():
    with pytest.raises(ValueError):
        base64_decode("not base64!")


def test_ids_int64_skips_invalid_parts():
    assert ids_int64("1,2,,x,3") == [1, 2, 3]
    assert ids_int64("") == []
    assert ids_int64(" 4,-5") == [-5]


def test_ids_int64_rejects_out_of_range():
    assert ids_int64(str(2**63)) == []


def test_ids_round_trip():
    ids = [7, -3, 1000000]
    assert ids_int64(ids_string(ids)) == ids
    assert ids_string([]) == ""


def test_keys_of_map_sorted():
    assert keys_of_map({"b": "1", "a": "2", "c": "3"}) == ["a", "b", "c"]


def test_map_to_list_has_all_keys():
    assert sorted(map_to_list({"x": None, "y": None})) == ["x", "y"]


def test_md5_of_empty_string():
    assert md5("") == "d41d8cd98f00b204e9800998ecf8427e"


def test_md5_shape_and_determinism():
    digest = md5("hello")
    assert len(digest) == 32
    assert set(digest) <= set("0123456789abcdef")
    assert md5("hello") == digest
    assert md5("hellp") != digest


def test_parse_lines_dedupes_and_normalizes():
    assert parse_lines("a\r\nb a\n\rc\rd") == ["a", "b", "c", "d"]


def test_parse_comma_handles_fullwidth_comma():
    assert parse_comma("a，b,a") == ["a", "b"]


def test_parse_comma_keeps_blank_parts_once():
    assert parse_comma("a,,b,") == ["a", "", "b"]


def test_parse_comma_trim_skips_blanks():
    assert parse_comma_trim("a, ,b,") == ["a", "b"]
    assert parse_comma_trim("x，x") == ["x"]


def test_rand_letters():
    value = rand_letters(50)
    assert len(value) == 50
    assert set(value) <= set(LETTERS)
    assert rand_letters(0) == ""


def test_rand_digits():
    value = rand_digits(20)
    assert len(value) == 20
    assert set(value) <= set(DIGITS)


def test_is_match_is_unanchored_and_tolerates_bad_patterns():
    assert is_match("abc123", r"\d+") is True
    assert is_match("abc", r"\d") is False
    assert is_match("abc", "(") is False


@pytest.mark.parametrize(
    "text, expected",
    [("abc-1_2.3", True), ("a b", False), ("", False), ("abc\n", False)],
)
def test_is_identifier(text, expected):
    assert is_identifier(text) is expected


def test_is_identifier_custom_pattern():
    assert is_identifier("ABC", r"^[A-Z]+$") is True
    assert is_identifier("abc", r"^[A-Z]+$") is False


def test_is_mail():
    assert is_mail("someone@example.com") is True
    assert is_mail("nobody") is False


def test_is_phone():
    assert is_phone("0" * 11) is True
    assert is_phone("0" * 10) is False
    assert is_phone("+" + "0" * 13) is True
    assert is_phone("+" + "0" * 11) is False


@pytest.mark.parametrize(
    "text, expected",
    [("10.0.0.1", True), ("1.2.3", False), ("1.2.3.4\n", False), ("a.b.c.d", False)],
)
def test_is_ip(text, expected):
    assert is_ip(text) is expected


@pytest.mark.parametrize("token", ["<", ">", "&", "'", '"', "file://", "../"])
def test_dangerous_tokens(token):
    assert dangerous(f"x{token}y") is True


def test_dangerous_safe_text():
    assert dangerous("plain text") is False


def test_to_en_symbol():
    assert to_en_symbol("a，b（c）：d。") == "a,b(c):d."


def test_trim_string_slice():
    assert trim_string_slice(None) == []
    assert trim_string_slice([" a ", "", " ", "b"]) == ["a", "b"]