from pixelbatch.spritefont import ASCII, CharRange, Character, SpriteFont


def _font():
    font = SpriteFont(name="test", size=16, ascent=12, descent=-4, line_gap=2)
    font[ord("a")] = Character(advance=5)
    font[ord("b")] = Character(advance=7)
    font[0xE9] = Character(advance=6)
    return font


def test_ascii_range():
    assert ASCII == (CharRange(32, 128),)
    assert CharRange.single(65) == CharRange(65, 65)


def test_line_height_adds_gap():
    font = _font()
    assert font.line_height() - font.height() == font.line_gap


def test_empty_text_measures_zero():
    font = _font()
    assert font.width_of("") == 0
    assert font.height_of("") == 0
    assert font.width_of_line("") == 0


def test_width_sums_advances():
    font = _font()
    assert font.width_of("ab") == font["a" and ord("a")].advance + font[ord("b")].advance


def test_width_includes_kerning():
    font = _font()
    plain = font.width_of("ab")
    font.set_kerning(ord("a"), ord("b"), -1.5)
    assert font.width_of("ab") == plain - 1.5


def test_width_is_widest_line():
    font = _font()
    assert font.width_of("a\nbb\na") == font.width_of("bb")


def test_width_of_multibyte_character():
    font = _font()
    assert font.width_of("é") == 6
    assert font.width_of("é".encode("utf-8")) == 6


def test_width_of_line_stops_at_newline():
    font = _font()
    text = "ab\nbbb"
    assert font.width_of_line(text) == font.width_of("ab")
    assert font.width_of_line(text, 3) == font.width_of("bbb")


def test_width_of_line_out_of_range():
    font = _font()
    assert font.width_of_line("ab", -1) == 0
    assert font.width_of_line("ab", 2) == 0


def test_height_of_lines():
    font = _font()
    one = font.height_of("ab")
    assert one == font.height()
    assert font.height_of("a\nb") - one == font.line_height()


def test_unknown_character_has_no_advance():
    font = _font()
    assert font.width_of("z") == 0
    assert ord("z") not in font


def test_kerning_zero_removes():
    font = _font()
    font.set_kerning(1, 2, 3.0)
    assert font.get_kerning(1, 2) == 3.0
    assert font.get_kerning(2, 1) == 0
    font.set_kerning(1, 2, 0)
    assert font.get_kerning(1, 2) == 0


def test_get_character_inserts():
    font = _font()
    character = font.get_character(ord("q"))
    character.advance = 4
    assert ord("q") in font
    assert font[ord("q")].advance == 4


def test_getitem_does_not_insert():
    font = _font()
    font[ord("x")].advance = 9
    assert font[ord("x")].advance == 0
    assert ord("x") not in font


def test_dispose_clears_everything():
    font = _font()
    font.textures.append(object())
    font.set_kerning(ord("a"), ord("b"), 1.0)
    font.dispose()
    assert font.textures == []
    assert font.name == ""
    assert ord("a") not in font
    assert font.get_kerning(ord("a"), ord("b")) == 0