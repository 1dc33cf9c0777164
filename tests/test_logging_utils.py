import logging

import pytest

from yapcsg.logging_utils import configure_logging, get_logger


@pytest.fixture
def restore_root():
    root = logging.getLogger('yapcsg')
    handlers = list(root.handlers)
    level = root.level
    propagate = root.propagate
    yield root
    root.handlers = handlers
    root.setLevel(level)
    root.propagate = propagate


def test_namespace():
    assert get_logger('solid').name == 'yapcsg.solid'
    assert get_logger('yapcsg.tasks').name == 'yapcsg.tasks'
    assert get_logger('yapcsg').name == 'yapcsg'


def test_level():
    assert get_logger('scratch', 'debug').level == logging.DEBUG
    assert get_logger('scratch').level == logging.NOTSET
    assert get_logger('scratch', logging.WARNING).level == logging.WARNING
    assert get_logger('scratch', 'nonsense').level == logging.INFO


def test_library_is_silent_by_default():
    import yapcsg

    root = logging.getLogger('yapcsg')
    assert any(isinstance(h, logging.NullHandler) for h in root.handlers)


def test_configure_logging(restore_root, capsys):
    root = configure_logging('DEBUG')
    assert root is restore_root
    assert root.level == logging.DEBUG
    assert not root.propagate
    configure_logging('INFO')
    streams = [h for h in root.handlers if isinstance(h, logging.StreamHandler)]
    assert len(streams) == 1
    assert not any(isinstance(h, logging.NullHandler) for h in root.handlers)

    get_logger('solid').info('hello')
    assert 'INFO yapcsg.solid: hello' in capsys.readouterr().out
