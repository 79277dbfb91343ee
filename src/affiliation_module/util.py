import functools
import html
import logging
from typing import Any, Callable
from twisted.web.server import Request
from synapse.module_api.errors import ConfigError

logger = logging.getLogger(__name__)


class AffiliationError(Exception):
    pass


class ProcessingHalted(AffiliationError):
    """
    Raised by a step after an unexpected fault has been reported.
    The host must stop processing the request; the fault is the __cause__
    """


# config validation

def _assert(b, module: str, msg: str):
    if not b:
        logger.error("[%s] Configuration error: %s", module, msg)
        raise ConfigError(f'{module} configuration error: {msg}')


def require_string(config: dict, key: str, module: str):
    if key in config:
        _assert(isinstance(config[key], str), module, f"'{key}' not a string literal")


def require_optional_string(config: dict, key: str, module: str):
    if key in config and config[key] is not None:
        require_string(config, key, module)
        _assert(config[key] != "", module, f"'{key}' must not be empty")


def require_string_list(config: dict, key: str, module: str):
    if key not in config:
        return
    value = config[key]
    _assert(isinstance(value, (list, tuple)), module, f"'{key}' not a list")
    _assert(all(isinstance(item, str) for item in value), module, f"'{key}' must only contain strings")


def require_string_or_list(config: dict, key: str, module: str):
    if key in config and not isinstance(config[key], str):
        require_string_list(config, key, module)
        _assert(len(config[key]) > 0, module, f"'{key}' must not be empty")


def rename_legacy_option(config: dict, old: str, new: str, module: str) -> dict:
    """
    Returns a copy of config where the deprecated option `old` is renamed to `new`.
    Setting both is an error rather than picking one of them
    """
    if old not in config:
        return config
    _assert(new not in config, module, f"'{old}' and '{new}' are both set, use only '{new}'")
    logger.warning("[%s] '%s' is deprecated, use '%s' instead", module, old, new)
    config = dict(config)
    config[new] = config.pop(old)
    return config


# fatal error reporting

HTML_ERROR_TEMPLATE = """<!DOCTYPE html>
<html lang=en>
  <head>
    <meta charset="utf-8">
    <title>Error {code}</title>
  </head>
  <body>
     <p>{msg}</p>
  </body>
</html>
"""


def _return_html_error(code: int, msg: str, request: Request):
    """Sends an HTML error page"""
    body = HTML_ERROR_TEMPLATE.format(code=code, msg=html.escape(msg)).encode("utf-8")
    request.setResponseCode(code)
    request.setHeader(b"Content-Type", b"text/html; charset=utf-8")
    request.setHeader(b"Content-Length", b"%i" % (len(body),))
    request.write(body)
    try:
        request.finish()
    except RuntimeError as e:
        logger.info("Connection disconnected before response was written: %r", e)


class HtmlErrorReporter:
    """
    Reports a fatal error by answering the failed request (state.request)
    with a generic error page. The error itself is not shown to the user
    """

    def __init__(self, code: int = 500, msg: str = "Internal server error"):
        self.code = code
        self.msg = msg

    def __call__(self, error: BaseException, state) -> None:
        if state.request is None:
            logger.debug("No request to send the error page to")
            return
        _return_html_error(self.code, self.msg, state.request)


def report_fatal_errors(f: Callable[..., Any]):
    """
    Wraps a step's process method: anything unexpected is logged, reported
    once through self.report_fatal (if set) and ends processing with
    ProcessingHalted, even when reporting fails
    """
    @functools.wraps(f)
    def wrapped(self, state):
        try:
            return f(self, state)
        except Exception as e:
            name = type(self).__name__
            logger.exception("[%s] Error processing request from %s" % (name, state.requesting_party))
            if self.report_fatal is not None:
                try:
                    self.report_fatal(e, state)
                except Exception:
                    logger.exception("[%s] Unable to report error" % (name,))
            raise ProcessingHalted(f'{name}: {e}') from e

    return wrapped
