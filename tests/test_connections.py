def _recorder(seen):
    return lambda gsettings, key: seen.append(key)


def test_disconnect_all_drops_every_handler(connections, settings):
    seen = []

    connections.connect(settings.settings, "changed::debug", _recorder(seen))
    connections.connect(settings.settings, "changed::panel-corner-radius", _recorder(seen))
    assert len(connections) == 2

    settings.DEBUG.set(True)
    assert seen == ["debug"]

    connections.disconnect_all()
    assert len(connections) == 0

    settings.DEBUG.set(False)
    settings.PANEL_CORNER_RADIUS.set(30)
    assert seen == ["debug"]


def test_detail_filters_signal(connections, settings):
    seen = []

    connections.connect(settings.settings, "changed::debug", _recorder(seen))
    settings.PANEL_CORNER_OPACITY.set(0.5)

    assert seen == []


def test_disconnect_all_tolerates_handlers_removed_elsewhere(connections, settings):
    handler_id = connections.connect(settings.settings, "changed::debug", _recorder([]))
    settings.settings.disconnect(handler_id)

    connections.disconnect_all()
    assert len(connections) == 0
