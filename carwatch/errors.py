# carwatch/errors.py
"""Exception hierarchy shared by the pipeline and the HTTP layer."""


class CarwatchError(Exception):
    pass


class InvalidFilters(CarwatchError):
    """Search filters failed validation; `field` names the first offender."""

    def __init__(self, field: str, message: str, errors=None):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
        self.errors = errors or []


class ConfigError(CarwatchError):
    pass


class ScrapeError(CarwatchError):
    pass


class AccessRestricted(ScrapeError):
    """The marketplace answered with a captcha or rate-limit page."""

    def __init__(self, marker: str):
        super().__init__(f"Access restricted by marketplace (matched {marker!r})")
        self.marker = marker


class NavigationError(ScrapeError):
    pass


class PersistenceError(CarwatchError):
    pass


class RunInProgress(CarwatchError):
    def __init__(self):
        super().__init__("A scrape run is already in progress")
