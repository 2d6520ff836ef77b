import logging
import os
import platform


def _supports_emoji():
    """Detect if terminal supports emoji display"""
    if platform.system() != "Windows":
        term = os.environ.get('TERM', '')
        return term in ('xterm-256color', 'gnome-256color', 'konsole-256color')

    term_program = os.environ.get('TERM_PROGRAM', '')
    return 'WindowsTerminal' in term_program or 'ConEmu' in term_program


class _LowercaseLevelFormatter(logging.Formatter):
	def format(self, record: logging.LogRecord) -> str:  # noqa: D401
		if record.levelname:
			record.levelname = record.levelname.lower()
		return super().format(record)


class _DebugTagFormatter(_LowercaseLevelFormatter):
	def format(self, record):
		if record.levelno == logging.DEBUG:
			return f"[debug] {record.getMessage()}"
		if record.levelno >= logging.WARNING:
			return f"{_GL_WARN}{record.getMessage()}"
		return record.getMessage()


_logger = logging.getLogger("yeelamp")


_GL_OK = "[ok] "
_GL_WARN = "[!] "


def configure(verbose: bool = False, show_payloads: bool = False) -> None:
	"""Configure the CLI logger.

	verbose=True  -> show debug records with a [debug] tag
	show_payloads -> print raw send/recv payloads
	"""
	_logger.setLevel(logging.DEBUG)
	_logger.handlers[:] = []
	_logger.propagate = False

	handler = logging.StreamHandler()
	handler.setLevel(logging.DEBUG if verbose else logging.INFO)
	handler.setFormatter(_DebugTagFormatter())
	_logger.addHandler(handler)

	_logger.show_payloads = bool(show_payloads or verbose)  # type: ignore[attr-defined]
	_logger.indent = 0  # type: ignore[attr-defined]
	_logger.verbose = bool(verbose)  # type: ignore[attr-defined]

	global _GL_OK, _GL_WARN
	if _supports_emoji():
		_GL_OK   = "✅ "
		_GL_WARN = "⚠️ "


def _prefix(extra_indent: int) -> str:
	base = int(getattr(_logger, "indent", 0))
	add = max(0, int(extra_indent or 0))
	return " " * (base + add)


# Thin UX helpers
def say(msg: str, *, extra_indent: int = 0) -> None:
	print(f"{_prefix(extra_indent)}{msg}")


def info(msg: str, *, extra_indent: int = 0) -> None:
	_logger.info(f"{_prefix(extra_indent)}{msg}")


def warn(msg: str, *, extra_indent: int = 0) -> None:
	_logger.warning(f"{_prefix(extra_indent)}{msg}")


def debug(msg: str, *, extra_indent: int = 0) -> None:
	_logger.debug(f"{_prefix(extra_indent)}{msg}")


def send(proto: str, payload: str, *, extra_indent: int = 0) -> None:
	if getattr(_logger, "show_payloads", False):
		print(f"{_prefix(extra_indent)}>> {proto} send: {payload}")


def recv(proto: str, payload: str, *, extra_indent: int = 0) -> None:
	if getattr(_logger, "show_payloads", False):
		print(f"{_prefix(extra_indent)}<< {proto} recv: {payload}")


def success(msg: str, *, extra_indent: int = 0) -> None:
	"""Success messages with clear visual indicator"""
	print(f"{_prefix(extra_indent)}{_GL_OK}{msg}")
