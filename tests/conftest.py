"""测试配置文件。

提供测试所需的fixtures和配置。
"""

import errno
import io
import json
import os
import threading
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

from py_tinypng.config import reset_config
from py_tinypng.core.transfer import TransferEngine
from py_tinypng.models import Settings


def _draw_image(path: Path, fmt: str, size: tuple[int, int] = (64, 48)) -> Path:
    """生成一张带图案的测试图片"""
    img = Image.new("RGB", size, color="white")
    draw = ImageDraw.Draw(img)
    for i in range(8):
        x, y = (i * 9) % size[0], (i * 7) % size[1]
        draw.rectangle([x, y, x + 10, y + 8], fill=(i * 30 % 256, 80, 200))
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path, fmt)
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """每个测试使用独立的设置文件路径"""
    monkeypatch.setenv("TINYPNG_SETTINGS_PATH", str(tmp_path / "settings.json"))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """临时目录fixture"""
    work = tmp_path / "work"
    work.mkdir()
    return work


@pytest.fixture
def make_png(temp_dir: Path) -> Callable[[str], Path]:
    """在临时目录中生成 PNG 文件"""

    def factory(name: str) -> Path:
        return _draw_image(temp_dir / name, "PNG")

    return factory


@pytest.fixture
def make_jpeg(temp_dir: Path) -> Callable[[str], Path]:
    """在临时目录中生成 JPEG 文件"""

    def factory(name: str) -> Path:
        return _draw_image(temp_dir / name, "JPEG")

    return factory


@pytest.fixture
def photos_dir(temp_dir: Path) -> Path:
    """包含 x.png 和 y.jpg 的目录"""
    photos = temp_dir / "photos"
    _draw_image(photos / "x.png", "PNG")
    _draw_image(photos / "y.jpg", "JPEG")
    return photos


@pytest.fixture
def settings() -> Settings:
    return Settings(credential="test-key")


@pytest.fixture
def deny_stat(monkeypatch: pytest.MonkeyPatch) -> Callable[[Path], None]:
    """让指定路径的 os.stat 抛出 EACCES，模拟无法访问的文件"""
    denied: set[str] = set()
    real_stat = os.stat
    real_path_stat = Path.stat

    def check(path) -> None:
        if isinstance(path, (str, os.PathLike)) and os.fspath(path) in denied:
            raise PermissionError(errno.EACCES, "Permission denied", os.fspath(path))

    def fake_stat(path, *args, **kwargs):
        check(path)
        return real_stat(path, *args, **kwargs)

    def fake_path_stat(self, *args, **kwargs):
        check(self)
        return real_path_stat(self, *args, **kwargs)

    monkeypatch.setattr(os, "stat", fake_stat)
    monkeypatch.setattr(Path, "stat", fake_path_stat)
    return lambda path: denied.add(os.fspath(path))


COMPRESSED_BYTES = b"\x89PNG\r\n\x1a\ncompressed"


class FakeResponse:
    """模拟 requests.Response"""

    def __init__(
        self,
        status_code: int = 200,
        body: dict | None = None,
        headers: dict | None = None,
        content: bytes = b"",
        text: str | None = None,
    ):
        self.status_code = status_code
        self.headers = headers or {}
        self._body = body
        self._text = text
        self._content = content

    def json(self):
        if self._body is None:
            return json.loads(self._text or "")
        return self._body

    def iter_content(self, chunk_size: int = 1):
        stream = io.BytesIO(self._content)
        while chunk := stream.read(chunk_size):
            yield chunk

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


class FakeTinyPNG:
    """模拟 TinyPNG 服务，记录所有请求

    rejections: 文件名 → (error, message)，命中时返回远端错误
    on_post: 上传时在工作线程中调用的钩子
    peak_in_flight: 同时处理中的上传请求数的峰值
    """

    def __init__(self):
        self.rejections: dict[str, tuple[str, str]] = {}
        self.download_failures: set[str] = set()
        self.posts: list[dict] = []
        self.gets: list[str] = []
        self.on_post: Callable[[], object] | None = None
        self.in_flight = 0
        self.peak_in_flight = 0
        self._lock = threading.Lock()

    def session_factory(self) -> "FakeSession":
        return FakeSession(self)

    def handle_post(self, url, data, auth, timeout) -> FakeResponse:
        with self._lock:
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.on_post is not None:
                self.on_post()
            return self._shrink(url, data, auth)
        finally:
            with self._lock:
                self.in_flight -= 1

    def _shrink(self, url, data, auth) -> FakeResponse:
        name = Path(data.name).name
        payload = data.read()
        with self._lock:
            self.posts.append(
                {"url": url, "name": name, "size": len(payload), "auth": auth}
            )

        if name in self.rejections:
            error, message = self.rejections[name]
            return FakeResponse(401, body={"error": error, "message": message})

        return FakeResponse(
            201,
            body={
                "input": {"size": len(payload), "type": "image/png"},
                "output": {"size": len(COMPRESSED_BYTES), "ratio": 0.25},
            },
            headers={"Location": f"https://api.tinypng.com/output/{name}"},
        )

    def handle_get(self, url, stream, timeout) -> FakeResponse:
        with self._lock:
            self.gets.append(url)
        if url.rsplit("/", 1)[-1] in self.download_failures:
            return FakeResponse(500)
        return FakeResponse(200, content=COMPRESSED_BYTES)


class FakeSession:
    """模拟 requests.Session"""

    def __init__(self, server: FakeTinyPNG):
        self.server = server

    def post(self, url, data=None, auth=None, timeout=None):
        return self.server.handle_post(url, data, auth, timeout)

    def get(self, url, stream=False, timeout=None):
        return self.server.handle_get(url, stream, timeout)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


@pytest.fixture
def fake_server() -> FakeTinyPNG:
    return FakeTinyPNG()


@pytest.fixture
def engine_factory(fake_server: FakeTinyPNG):
    """使用模拟服务的传输引擎工厂"""

    def factory(settings: Settings) -> TransferEngine:
        return TransferEngine(
            credential=settings.credential,
            session_factory=fake_server.session_factory,
        )

    return factory
