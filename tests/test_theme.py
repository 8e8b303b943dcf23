from service.theme import Theme, ThemeContext, parse_declarations


def test_parse_declarations():
    assert parse_declarations(" a: 1px; b : red ;broken; c:") == {"a": "1px", "b": "red"}


def test_node_merges_inline_style_over_class_rules(theme_context):
    node = theme_context.get_theme().get_node("panel-corner", "-panel-corner-radius: 9px")

    assert node.lookup_length("-panel-corner-radius") == (True, 9.0)
    assert node.lookup_double("-panel-corner-opacity") == (True, 0.5)


def test_grouped_selectors_share_declarations():
    theme = Theme(".panel-corner, .other { -panel-corner-opacity: 0.3; }")

    assert theme.get_node("other").lookup_double("-panel-corner-opacity") == (True, 0.3)


def test_lengths_are_scaled():
    node = Theme(".panel-corner { -a: 6px; -b: 3pt; -c: 5; }").get_node("panel-corner", scale_factor=2)

    assert node.lookup_length("-a") == (True, 12.0)
    assert node.lookup_length("-b") == (True, 8.0)
    assert node.lookup_length("-c") == (True, 10.0)


def test_failed_lookups_report_not_found():
    node = Theme(".panel-corner { -a: wide; -c: nocolor; }").get_node("panel-corner")

    assert node.lookup_length("-a")[0] is False
    assert node.lookup_length("-missing")[0] is False
    assert node.lookup_double("-a")[0] is False
    assert node.lookup_color("-c") == (False, None)


def test_color_lookup():
    node = Theme(".panel-corner { -c: #ff000080; }").get_node("panel-corner")

    found, color = node.lookup_color("-c")

    assert found
    assert (color.red, color.green, color.blue) == (1.0, 0.0, 0.0)
    assert abs(color.alpha - 128 / 255) < 1e-6


def test_scale_factor_change_notifies(theme_context):
    changes = []
    theme_context.connect("changed", lambda ctx: changes.append(ctx.scale_factor))

    theme_context.scale_factor = 2
    theme_context.scale_factor = 2

    assert changes == [2]
    assert theme_context.get_node("panel-corner").lookup_length("-panel-corner-radius") == (True, 12.0)


def test_load_theme_keeps_current_theme_on_error(theme_context, tmp_path):
    current = theme_context.get_theme()

    assert theme_context.load_theme(str(tmp_path / "missing.css")) is False
    assert theme_context.get_theme() is current


def test_load_theme_replaces_theme(theme_context, tmp_path):
    path = tmp_path / "corners.css"
    path.write_text(".panel-corner { -panel-corner-radius: 4px; }")
    changes = []
    theme_context.connect("changed", lambda ctx: changes.append(True))

    assert theme_context.load_theme(str(path)) is True

    assert changes == [True]
    assert theme_context.get_node("panel-corner").lookup_length("-panel-corner-radius") == (True, 4.0)
