"""Shared fixtures: canned HTML, a fake HTTP session and a fake renderer."""

import asyncio
import os
import tempfile

os.environ.setdefault("LOG_FILE_PATH", os.path.join(tempfile.gettempdir(), "f95metadata-tests", "test.log"))

import pytest
import requests
from requests.cookies import create_cookie

from f95metadata.config import create_cookie_jar

THREADS_URL = "https://f95zone.to/threads/"

THREAD_HTML = """
<html>
<head>
  <title>Corrupted Kingdoms [v0.12.8] [ArcGames] | F95zone</title>
  <meta property="og:title" content="Corrupted Kingdoms">
  <meta property="og:image" content="https://f95zone.to/data/covers/12/12345.jpg">
</head>
<body>
  <div class="p-title">
    <h1 class="p-title-value"><a href="/forums/games.2/?prefix_id=7" class="labelLink" rel="nofollow"><span class="label label--blue" dir="auto">Ren'Py</span></a><span class="label-append">&nbsp;</span><a href="/forums/games.2/?prefix_id=18" class="labelLink" rel="nofollow"><span class="label label--green" dir="auto">Completed</span></a><span class="label-append">&nbsp;</span>Corrupted Kingdoms [v0.12.8] [ArcGames]</h1>
  </div>
  <div class="tagList">
    <a href="/tags/2dcg/" class="tagItem" dir="auto">2dcg</a>
    <a href="/tags/male-protagonist/" class="tagItem" dir="auto">male protagonist</a>
    <a href="/tags/sandbox/" class="tagItem" dir="auto">&lt;b&gt;sandbox&lt;/b&gt;</a>
    <a href="/tags/blank/" class="tagItem" dir="auto">   </a>
    <span class="tagItem">not an anchor</span>
  </div>
  <select name="rating" data-initial-rating="4.5"><option value="1">Terrible</option></select>
  <span class="bratr-rating" title="4.20 star(s)"></span>
  <article class="message message--post message-threadStarterPost">
    <div class="message-body">
      <div class="bbWrapper"><div>Overview: A kingdom falls and you pick up the pieces.</div>
        <a href="https://attachments.f95zone.to/2023/01/1_full.png"><img src="https://attachments.f95zone.to/2023/01/thumb/1.png"></a>
        <a href="https://attachments.f95zone.to/2023/01/2_full.png"><noscript><img src="https://attachments.f95zone.to/2023/01/thumb/2.png"></noscript></a>
        <a href="https://example.com/gallery"><img src="https://attachments.f95zone.to/2023/01/3.png"></a>
        <img src="https://static.f95zone.to/smilies/smile.png">
        <img src="https://attachments.f95zone.to/2023/01/4.png">
        <a href="https://www.patreon.com/arcgames">https://www.patreon.com/arcgames</a>
        <a href="https://arcgames.example/">Website</a>
        <a href=" HTTPS://WWW.PATREON.COM/arcgames ">Patreon again</a>
        <a href="https://discord.gg/arcgames">here</a>
        <a href="https://itch.io/arcgames">Link</a>
        <a href="https://mega.nz/file/abc">mega download</a>
        <a href="">Empty link</a>
        <a href="https://subscribestar.adult/arcgames">   </a>
        <a href="/threads/corrupted-kingdoms-sequel.99999/">sequel thread</a>
      </div>
    </div>
  </article>
</body>
</html>
"""

CHALLENGE_HTML = """
<html>
<head><title>DDoS-Guard</title></head>
<body>
  <div class="ddg-captcha"></div>
  <p>Checking your browser before accessing f95zone.to.</p>
</body>
</html>
"""

LOGIN_WALL_HTML = """
<html>
<head><title>Error | F95zone</title></head>
<body><div class="blockMessage">Sorry, you have to be logged in to do that.</div></body>
</html>
"""

ADGLARE_HTML = """
<html><body><script>var AdGlareDisplayAd = true;</script></body></html>
"""

SEARCH_HTML = """
<html>
<body>
  <ol class="block-body">
    <li class="block-row block-row--separated" data-author="Fenoxo">
      <div class="contentRow"><div class="contentRow-main">
        <h3 class="contentRow-title"><a href="/threads/corruption-of-champions.1234/">[Flash] [Completed] Corruption of Champions [Fenoxo]</a></h3>
      </div></div>
    </li>
    <li class="block-row block-row--separated">
      <div class="contentRow"><div class="contentRow-main">
        <h3 class="contentRow-title"><a href="/threads/no-author.1/">Missing Author Row</a></h3>
      </div></div>
    </li>
    <li class="block-row block-row--separated" data-author="Nobody">
      <div class="contentRow"><div class="contentRow-main"><h3 class="contentRow-title">No anchor here</h3></div></div>
    </li>
    <li class="block-row block-row--separated" data-author="Blank">
      <div class="contentRow"><div class="contentRow-main">
        <h3 class="contentRow-title"><a href="  ">Blank link</a></h3>
      </div></div>
    </li>
    <li class="block-row block-row--separated" data-author="Savin">
      <div class="contentRow"><div class="contentRow-main">
        <h3 class="contentRow-title"><a href="https://f95zone.to/threads/corruption-of-champions-ii.5678/">[Others] Corruption of Champions II [v0.4.28] [Savin/Salamander Studios]</a></h3>
      </div></div>
    </li>
  </ol>
</body>
</html>
"""

REASONS = {200: "OK", 301: "Moved Permanently", 302: "Found", 403: "Forbidden", 404: "Not Found", 500: "Internal Server Error"}


def make_response(url, status=200, body="", headers=None):
    response = requests.Response()
    response.status_code = status
    response.reason = REASONS.get(status, "")
    response.url = url
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


class FakeSession(requests.Session):
    """requests.Session answering GETs from a url -> Response (or exception) table."""

    def __init__(self, routes=None):
        super().__init__()
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        route = self.routes.get(url)
        if route is None:
            return make_response(url, 404)
        if isinstance(route, Exception):
            raise route
        return route


class CookieSettingSession(FakeSession):
    """Stores a cookie in its own jar on every response, like a real Set-Cookie."""

    def get(self, url, **kwargs):
        self.sent = sorted({cookie.name for cookie in self.cookies} | {cookie.name for cookie in kwargs.get("cookies") or []})
        response = super().get(url, **kwargs)
        self.cookies.set("injected", "1", domain="f95zone.to", path="/")
        return response


class FakeRenderer:
    """Records every renderer call; optionally fails or hangs at a given step."""

    def __init__(self, page_source="", fail_on=None, hang_on=None):
        self.page_source = page_source
        self.fail_on = fail_on
        self.hang_on = hang_on
        self.calls = []
        self.cookies = []

    async def _step(self, name):
        self.calls.append(name)
        if self.fail_on == name:
            raise RuntimeError(f"{name} exploded")
        if self.hang_on == name:
            await asyncio.Event().wait()

    async def open(self, settings):
        self.settings = settings
        await self._step("open")

    async def set_cookies(self, url, domain, name, value, path, expiry):
        self.cookies.append({"url": url, "domain": domain, "name": name, "value": value, "path": path, "expiry": expiry})

    async def navigate_and_wait(self, url):
        self.url = url
        await self._step("navigate")

    async def get_page_source(self):
        await self._step("source")
        return self.page_source

    async def close(self):
        self.calls.append("close")

    async def dispose(self):
        self.calls.append("dispose")


class RecordingNotifier:
    def __init__(self):
        self.notifications = []

    def notify(self, key, message, title):
        self.notifications.append((key, message, title))


@pytest.fixture()
def cookie_jar():
    jar = create_cookie_jar([("xf_user", "123%2Cabc"), ("xf_csrf", "token")])
    jar.set_cookie(create_cookie("other", "value", domain="example.com"))
    return jar


@pytest.fixture()
def notifier():
    return RecordingNotifier()
