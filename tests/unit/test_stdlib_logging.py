from __future__ import annotations

import io
import logging

import pytest

from adoc_reducer.core.stdlib_logging import PACKAGE_LOGGER, configure_stdlib_logging

log = logging.getLogger("adoc_reducer.core.document.reader")


def test_warn_level_writes_warnings_to_stream():
    stream = io.StringIO()
    configure_stdlib_logging(level="warn", stream=stream)

    log.info("hidden")
    log.warning("include file not found: x.adoc")

    assert stream.getvalue() == "adoc-reducer: WARNING: include file not found: x.adoc\n"


def test_debug_level():
    stream = io.StringIO()
    configure_stdlib_logging(level="debug", stream=stream, fmt="%(levelname)s %(message)s")

    log.debug("details")

    assert stream.getvalue() == "DEBUG details\n"


@pytest.mark.parametrize("name,level", [("fatal", logging.CRITICAL), ("WARN", logging.WARNING), ("error", logging.ERROR)])
def test_level_names(name, level):
    configure_stdlib_logging(level=name, stream=io.StringIO())

    assert logging.getLogger(PACKAGE_LOGGER).level == level


def test_none_silences_package():
    configure_stdlib_logging(level=None)

    assert not logging.getLogger(PACKAGE_LOGGER).isEnabledFor(logging.CRITICAL)


def test_reconfigure_replaces_handler():
    first, second = io.StringIO(), io.StringIO()
    configure_stdlib_logging(stream=first)
    configure_stdlib_logging(stream=second)

    log.error("once")

    assert first.getvalue() == ""
    assert second.getvalue().count("once") == 1
    assert len(logging.getLogger(PACKAGE_LOGGER).handlers) == 1


def test_unknown_level():
    with pytest.raises(ValueError, match="unknown log level"):
        configure_stdlib_logging(level="loud")
