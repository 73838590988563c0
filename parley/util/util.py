import logging
import subprocess
from importlib.metadata import PackageNotFoundError, version


def addLoggingLevel(
    levelName: str = "TRACE", levelNum: int = logging.DEBUG - 5, methodName=None
):
    """
    Add a new logging level to the `logging` module and the currently
    configured logger class.

    `levelName` becomes an attribute of the `logging` module with the value
    `levelNum`. `methodName` (defaults to `levelName.lower()`) becomes a
    convenience method for both `logging` itself and the class returned by
    `logging.getLoggerClass()`.

    Existing attributes are left alone, so calling this twice is harmless.

    >>> addLoggingLevel('TRACE', logging.DEBUG - 5)
    >>> logging.getLogger(__name__).trace('that worked')
    """
    if not methodName:
        methodName = levelName.lower()

    if hasattr(logging, levelName):
        log.debug("%s already defined in logging module", levelName)
        return
    if hasattr(logging, methodName):
        log.debug("%s already defined in logging module", methodName)
        return
    if hasattr(logging.getLoggerClass(), methodName):
        log.debug("%s already defined in logger class", methodName)
        return

    def logForLevel(self, message, *args, **kwargs):
        if self.isEnabledFor(levelNum):
            self._log(levelNum, message, args, **kwargs)

    def logToRoot(message, *args, **kwargs):
        logging.log(levelNum, message, *args, **kwargs)

    logging.addLevelName(levelNum, levelName)
    setattr(logging, levelName, levelNum)
    setattr(logging.getLoggerClass(), methodName, logForLevel)
    setattr(logging, methodName, logToRoot)


def get_version() -> str:
    try:
        return version("parley")
    except PackageNotFoundError:
        pass

    try:
        git = subprocess.check_output(
            ["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL
        ).decode()
    except (FileNotFoundError, subprocess.CalledProcessError):
        pass
    else:
        return "git-" + git[:10]

    return "NO_VERSION"


log = logging.getLogger(__name__)
