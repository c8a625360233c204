"""
Tests for the decoding engine: matcher, escapes, decoders and rendering.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import GHOST, SHARED_VECTORS

from cipher312 import decode_text
from cipher312.codec import (
    Codec,
    DecodeError,
    DecodeResult,
    InvalidUnicode,
    KnownValue,
    UnicodeParseError,
    UnknownSequence,
    decode,
    decode_v1,
    decode_v2,
    match_one,
    render,
)
from cipher312._normalize import normalize
from cipher312.symbols import build_mappings


def _match_all(mappings, text):
    graphemes = []
    pos = 0
    while pos < len(text):
        grapheme, consumed = match_one(mappings, text, pos)
        graphemes.append(grapheme)
        pos += consumed
    return DecodeResult(tuple(graphemes))


# =============================================================================
# Grapheme Matcher
# =============================================================================


class TestMatchOne:
    def test_known_pattern(self, v1_mappings):
        grapheme, consumed = match_one(v1_mappings, "111")
        assert grapheme == KnownValue("A")
        assert consumed == 3

    def test_position(self, v1_mappings):
        grapheme, consumed = match_one(v1_mappings, "111112", 3)
        assert grapheme == KnownValue("B")
        assert consumed == 3

    def test_single_digit_pattern(self, v1_mappings):
        assert match_one(v1_mappings, "0111") == (KnownValue(" "), 1)

    def test_variant_match(self):
        mappings = build_mappings([("111", "A"), ("112", "B")])
        grapheme, consumed = match_one(mappings, "4114")
        assert grapheme == KnownValue("A")
        assert grapheme.source == "41"
        assert consumed == 2

    def test_variants_decode_sequence(self):
        mappings = build_mappings([("111", "A"), ("112", "B")])
        assert str(_match_all(mappings, "4114")) == "AA"

    def test_first_match_beats_longer_match(self):
        mappings = build_mappings([("1", "X"), ("111", "A")])
        assert match_one(mappings, "111") == (KnownValue("X"), 1)

    def test_variant_beats_later_pattern(self):
        mappings = build_mappings([("111", "A"), ("41", "Z")])
        assert match_one(mappings, "41") == (KnownValue("A"), 2)

    def test_canonical_before_variant(self):
        mappings = build_mappings([("112", "B"), ("42", "Q")])
        assert match_one(mappings, "112")[0] == KnownValue("B")

    @pytest.mark.parametrize("text, raw", [
        ("fk", "fk"),
        ("9", "9"),
        ("abcdef", "abc"),
        ("777111", "777"),
    ])
    def test_unknown_fallback(self, v1_mappings, text, raw):
        grapheme, consumed = match_one(v1_mappings, text)
        assert grapheme == UnknownSequence(raw)
        assert consumed == len(raw)

    def test_always_progresses(self, v1_mappings):
        for text in ["x", "xy", "xyz", "xyzw", "1", "12"]:
            _, consumed = match_one(v1_mappings, text)
            assert 1 <= consumed <= 3

    def test_end_of_input(self, v1_mappings):
        with pytest.raises(DecodeError):
            match_one(v1_mappings, "111", 3)
        with pytest.raises(DecodeError):
            match_one(v1_mappings, "")


# =============================================================================
# Shared Decoding
# =============================================================================


class TestSharedVectors:
    @pytest.mark.parametrize("ciphertext, expected", SHARED_VECTORS)
    def test_v1(self, codec, ciphertext, expected):
        assert str(codec.decode_v1(normalize(ciphertext))) == expected

    @pytest.mark.parametrize("ciphertext, expected", SHARED_VECTORS)
    def test_v2(self, codec, ciphertext, expected):
        assert str(codec.decode_v2(normalize(ciphertext))) == expected

    @pytest.mark.parametrize("ciphertext, expected", SHARED_VECTORS)
    def test_decode(self, codec, ciphertext, expected):
        assert str(codec.decode(normalize(ciphertext))) == expected

    def test_structured_result(self, codec):
        result = codec.decode(normalize("41fk"))
        assert result.graphemes == (KnownValue("A"), UnknownSequence("fk"))

    def test_accepts_plain_string(self, codec):
        assert str(codec.decode_v1("1321521321353")) == "HELLO"


# =============================================================================
# Unicode Escapes
# =============================================================================


class TestEscapes:
    def test_ghost(self, codec):
        result = codec.decode_v2(normalize(GHOST))
        assert result.graphemes == (KnownValue("👻"),)
        assert str(result) == "👻"

    def test_escape_consumes_delimiters(self, codec):
        result = codec.decode_v2(normalize(GHOST))
        assert result[0].source == "791181123281381112791"

    def test_ascii_codepoint(self, codec):
        # 791 | 281 181 | 791 → "41" → U+0041
        assert str(codec.decode_v2("791281181791")) == "A"

    def test_escape_between_text(self, codec):
        assert str(codec.decode_v2("13215213213530" + GHOST)) == "HELLO 👻"

    def test_empty_payload(self, codec):
        result = codec.decode_v2("791791")
        assert result.graphemes == (InvalidUnicode(UnicodeParseError.INVALID_CIPHER),)
        assert str(result) == "⊠"

    def test_payload_not_hex(self, codec):
        # R is not a hexadecimal digit
        result = codec.decode_v2("791233791")
        assert result.graphemes == (
            InvalidUnicode(UnicodeParseError.INVALID_HEXADECIMAL),
        )

    def test_payload_with_unknown_sequence(self, codec):
        result = codec.decode_v2("79199791")
        assert result[0] == InvalidUnicode(UnicodeParseError.INVALID_HEXADECIMAL)

    def test_codepoint_out_of_range(self, codec):
        # 110000
        result = codec.decode_v2("791181181888888888888791")
        assert result[0] == InvalidUnicode(UnicodeParseError.INVALID_HEXADECIMAL)

    def test_surrogate_rejected(self, codec):
        # D800
        result = codec.decode_v2("791121382888888791")
        assert result[0] == InvalidUnicode(UnicodeParseError.INVALID_HEXADECIMAL)

    def test_unterminated_escape(self, codec):
        result = codec.decode_v2("791111")
        assert result.graphemes == (UnknownSequence("791"), KnownValue("A"))
        assert str(result) == "¿791?A"

    def test_unterminated_escape_is_deterministic(self, codec):
        first = codec.decode_v2("7914842")
        second = codec.decode_v2("7914842")
        assert first == second

    def test_depth_limit(self):
        codec = Codec(max_depth=0)
        result = codec.decode_v2(GHOST)
        assert result.graphemes == (InvalidUnicode(UnicodeParseError.DEPTH_EXCEEDED),)
        assert str(result) == "⊠"

    def test_depth_limit_one_allows_top_level(self):
        assert str(Codec(max_depth=1).decode_v2(GHOST)) == "👻"

    def test_negative_depth_rejected(self):
        with pytest.raises(ValueError):
            Codec(max_depth=-1)

    def test_v1_ignores_escapes(self, codec):
        assert str(codec.decode_v1(GHOST)) == "¿791?¿181?F¿281?¿381?B¿791?"

    def test_decode_prefers_v2(self, codec):
        assert str(codec.decode(GHOST)) == "👻"


# =============================================================================
# Failure Modes
# =============================================================================


class TestFailures:
    def test_v1_empty(self, codec):
        with pytest.raises(DecodeError):
            codec.decode_v1(normalize(""))

    def test_v2_empty(self, codec):
        with pytest.raises(DecodeError):
            codec.decode_v2(normalize(""))

    def test_decode_empty(self, codec):
        with pytest.raises(DecodeError):
            codec.decode(normalize(""))

    def test_decode_error_is_value_error(self, codec):
        with pytest.raises(ValueError):
            codec.decode("")

    @pytest.mark.parametrize("text", ["x", "¿?", "   ", "7", "99999999"])
    def test_garbage_does_not_raise(self, codec, text):
        result = codec.decode(text)
        assert all(isinstance(g, UnknownSequence) for g in result)


# =============================================================================
# Properties
# =============================================================================


_PROPERTY_INPUTS = [
    "41fk",
    GHOST,
    "791791",
    "7914842",
    "13215213213530" + GHOST,
    "hello world",
    "0000",
    "12",
    "4444444",
    "791233791fk0",
] + [ciphertext for ciphertext, _ in SHARED_VECTORS]


class TestProperties:
    @pytest.mark.parametrize("text", _PROPERTY_INPUTS)
    def test_consumed_text_covers_input_v1(self, codec, text):
        normalized = normalize(text)
        assert codec.decode_v1(normalized).source == normalized.text

    @pytest.mark.parametrize("text", _PROPERTY_INPUTS)
    def test_consumed_text_covers_input_v2(self, codec, text):
        normalized = normalize(text)
        assert codec.decode_v2(normalized).source == normalized.text

    @pytest.mark.parametrize("text", _PROPERTY_INPUTS)
    def test_decode_matches_v2(self, codec, text):
        normalized = normalize(text)
        assert codec.decode(normalized) == codec.decode_v2(normalized)

    @pytest.mark.parametrize("text", _PROPERTY_INPUTS)
    def test_render_deterministic(self, codec, text):
        result = codec.decode(text)
        assert render(result) == render(result) == str(result)


# =============================================================================
# Rendering
# =============================================================================


class TestRender:
    def test_known(self):
        assert render([KnownValue("H"), KnownValue("I")]) == "HI"

    def test_unknown_markers(self):
        assert render([UnknownSequence("fk")]) == "¿fk?"

    @pytest.mark.parametrize("reason", list(UnicodeParseError))
    def test_invalid_unicode_placeholder(self, reason):
        assert render([InvalidUnicode(reason)]) == "⊠"

    def test_empty(self):
        assert render([]) == ""

    def test_mixed(self):
        graphemes = [
            KnownValue("A"),
            UnknownSequence("9"),
            InvalidUnicode(UnicodeParseError.INVALID_CIPHER),
        ]
        assert render(graphemes) == "A¿9?⊠"


# =============================================================================
# Module-level Functions
# =============================================================================


class TestModuleFunctions:
    def test_decode_v1(self):
        assert str(decode_v1("3121534312")) == "TEST"

    def test_decode_v2(self):
        assert str(decode_v2(GHOST)) == "👻"

    def test_decode(self):
        assert str(decode("1321521321353")) == "HELLO"

    def test_decode_text(self):
        assert decode_text("54634341653520343124126312") == "MISSION START"

    def test_decode_text_empty(self):
        with pytest.raises(DecodeError):
            decode_text("")


# =============================================================================
# Concurrency
# =============================================================================


class TestConcurrency:
    def test_shared_codec_across_threads(self):
        inputs = [ciphertext for ciphertext, _ in SHARED_VECTORS] + [GHOST] * 4
        expected = [str(decode(text)) for text in inputs]

        def run(_):
            return [str(decode(text)) for text in inputs]

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(run, range(16)))

        assert all(result == expected for result in results)
