import pytest


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", url: str = ""):
        self.status_code = status_code
        self.text = text
        self.url = url


class FakePage:
    """Page double: serves content set up front, records close() calls."""

    def __init__(self, url: str = "https://example.test/list", content: str = "", payload=None):
        self.url = url
        self.content = content
        self.payload = payload
        self.closed = False
        self._document = None

    @property
    def document(self):
        if self._document is None:
            from harvester.parse.html_parser import parse_content

            self._document = parse_content(self.content)
        return self._document

    def json(self):
        return self.payload

    async def goto(self, url):
        self.url = url
        return FakeResponse(200, self.content, url)

    async def close(self):
        self.closed = True


class ScriptedSession:
    """BrowserSession double whose navigations follow a script.

    Each script item is a status code, None (no response), or an exception
    instance to raise from goto().
    """

    def __init__(self, script):
        self.script = list(script)
        self.pages = []

    async def new_page(self):
        session = self

        class _Page(FakePage):
            async def goto(self, url):
                self.url = url
                outcome = session.script.pop(0)
                if isinstance(outcome, BaseException):
                    raise outcome
                if outcome is None:
                    return None
                return FakeResponse(outcome, "", url)

        page = _Page()
        self.pages.append(page)
        return page


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()
