"""集成测试。

测试批量协调、压缩器接口、命令行和 MCP 服务器。
"""

import json
import threading
from pathlib import Path

import pytest
import requests

from py_tinypng.cli import main
from py_tinypng.compressor import TinyPNGCompressor
from py_tinypng.engine.batch import BatchCoordinator
from py_tinypng.engine.concurrent_executor import ConcurrentExecutor
from py_tinypng.exceptions import ConfigurationError
from py_tinypng.models import BatchSummary, JobStatus, Settings, TransferJob
from py_tinypng.settings_store import SettingsStore


def _unexpected_engine(settings):
    raise AssertionError("不应创建传输引擎")


class TestBatchCoordinator:
    """批量协调器测试"""

    def test_partial_failure_does_not_abort_siblings(
        self, make_png, settings, engine_factory, fake_server
    ):
        """测试部分失败不影响其他任务"""
        sources = [make_png(f"img{i}.png") for i in range(5)]
        jobs = [
            TransferJob(input_path=p, output_path=p.with_name(f"{p.stem}_tiny.png"))
            for p in sources
        ]
        fake_server.rejections["img2.png"] = (
            "Unauthorized",
            "Credentials are invalid",
        )
        finished: list[TransferJob] = []

        result = BatchCoordinator(
            max_workers=3, engine_factory=engine_factory
        ).run(jobs, settings, on_job_done=finished.append)

        assert result.summary == BatchSummary(total=5, succeeded=4, failed=1)
        assert len(finished) == 5
        failed = result.get_failed_jobs()
        assert [job.input_path.name for job in failed] == ["img2.png"]
        assert failed[0].error == "Unauthorized: Credentials are invalid"
        assert all(job.is_terminal for job in result.jobs)
        assert len(fake_server.posts) == 5

    def test_empty_job_list_never_touches_network(self, settings, fake_server):
        """测试空任务列表不访问网络"""
        result = BatchCoordinator(engine_factory=_unexpected_engine).run([], settings)

        assert result.summary == BatchSummary(total=0, succeeded=0, failed=0)
        assert result.jobs == []
        assert fake_server.posts == []

    def test_empty_job_list_without_credential(self):
        """测试空任务列表无需API key"""
        result = BatchCoordinator(engine_factory=_unexpected_engine).run([], Settings())

        assert result.summary.total == 0

    def test_missing_credential_is_fatal(self, make_png):
        """测试缺少API key"""
        source = make_png("a.png")
        jobs = [TransferJob(input_path=source, output_path=source)]

        with pytest.raises(ConfigurationError):
            BatchCoordinator(engine_factory=_unexpected_engine).run(jobs, Settings())

        assert jobs[0].status == JobStatus.PENDING

    def test_summary_matches_fold_over_jobs(
        self, make_png, settings, engine_factory, fake_server
    ):
        """测试统计与任务结果一致"""
        sources = [make_png(f"s{i}.png") for i in range(4)]
        jobs = [TransferJob(input_path=p, output_path=p) for p in sources]
        fake_server.download_failures.add("s1.png")

        result = BatchCoordinator(max_workers=2, engine_factory=engine_factory).run(
            jobs, settings
        )

        assert result.summary == BatchSummary.from_jobs(result.jobs)
        assert result.summary.failed == 1

    def test_jobs_run_concurrently(
        self, make_png, settings, engine_factory, fake_server
    ):
        """测试任务并发执行"""
        sources = [make_png(f"c{i}.png") for i in range(6)]
        jobs = [TransferJob(input_path=p, output_path=p) for p in sources]
        # 每个上传都要等到 3 个请求同时到达，串行执行会超时失败
        barrier = threading.Barrier(3)
        fake_server.on_post = lambda: barrier.wait(timeout=5)

        result = BatchCoordinator(max_workers=3, engine_factory=engine_factory).run(
            jobs, settings
        )

        assert result.summary == BatchSummary(total=6, succeeded=6, failed=0)
        assert fake_server.peak_in_flight == 3


class TestConcurrentExecutor:
    """并发执行器测试"""

    def test_worker_exception_becomes_failed_job(self, make_png):
        """测试工作线程异常转换为失败任务"""
        source = make_png("boom.png")
        job = TransferJob(input_path=source, output_path=source)

        def explode(job: TransferJob) -> TransferJob:
            raise RuntimeError("boom")

        results = ConcurrentExecutor(max_workers=2).execute_tasks([job], explode)

        assert results == [job]
        assert job.status == JobStatus.FAILED
        assert "boom" in job.error

    def test_invalid_worker_count(self):
        """测试无效的并发数"""
        with pytest.raises(ValueError):
            ConcurrentExecutor(max_workers=0)


class TestTinyPNGCompressor:
    """压缩器接口测试"""

    def test_compress_directory(self, photos_dir: Path, settings, engine_factory):
        """测试压缩目录"""
        compressor = TinyPNGCompressor(
            settings.with_overrides(allow_nonpng=True), engine_factory=engine_factory
        )

        result = compressor.compress([photos_dir])

        assert result.summary.succeeded == 2
        assert (photos_dir / "x_tiny.png").exists()
        assert (photos_dir / "y_tiny.jpg").exists()
        assert result.get_total_size_saved() > 0

    def test_no_matching_files(self, temp_dir: Path, settings, fake_server):
        """测试没有匹配的文件"""
        compressor = TinyPNGCompressor(settings, engine_factory=_unexpected_engine)

        result = compressor.compress([str(temp_dir / "*.png")])

        assert result.summary.total == 0
        assert fake_server.posts == []

    def test_collect_jobs_skips_unreadable_entries(
        self, make_png, temp_dir: Path, settings, deny_stat
    ):
        """测试跳过目录中无法访问的文件"""
        make_png("ok.png")
        deny_stat(make_png("locked.png"))

        jobs = TinyPNGCompressor(settings).collect_jobs([temp_dir])

        assert [job.input_path.name for job in jobs] == ["ok.png"]


class TestSettingsStore:
    """设置存储测试"""

    def test_missing_file_yields_defaults(self, tmp_path: Path):
        """测试设置文件不存在时使用默认值"""
        store = SettingsStore(tmp_path / "none" / "settings.json")

        assert store.load() == Settings()

    def test_update_persists(self, tmp_path: Path):
        """测试保存设置"""
        path = tmp_path / "conf" / "settings.json"
        store = SettingsStore(path)

        store.update(credential="secret")

        assert json.loads(path.read_text())["credential"] == "secret"
        assert SettingsStore(path).load().credential == "secret"

    def test_invalid_file_raises(self, tmp_path: Path):
        """测试无效的设置文件"""
        path = tmp_path / "settings.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            SettingsStore(path).load()

    def test_legacy_api_key_field(self, tmp_path: Path):
        """测试兼容旧版api_key字段"""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"api_key": "legacy", "allow_rewrite": True}))

        settings = SettingsStore(path).load()

        assert settings.credential == "legacy"
        assert settings.allow_rewrite is True

    def test_default_path_from_environment(self, tmp_path: Path):
        """测试从环境变量读取设置路径"""
        assert SettingsStore().path == tmp_path / "settings.json"


class TestCommandLine:
    """命令行测试"""

    @pytest.fixture(autouse=True)
    def fake_network(self, monkeypatch: pytest.MonkeyPatch, fake_server):
        monkeypatch.setattr(requests, "Session", fake_server.session_factory)

    def test_no_arguments_prints_help(self, capsys):
        """测试无参数时显示帮助"""
        assert main([]) == 0

        assert "usage:" in capsys.readouterr().out

    def test_missing_credential_exits_nonzero(self, make_png, capsys, fake_server):
        """测试缺少API key时退出码为1"""
        source = make_png("a.png")

        assert main([str(source)]) == 1

        assert "API key" in capsys.readouterr().err
        assert fake_server.posts == []

    def test_api_key_is_persisted(self, capsys):
        """测试保存API key"""
        assert main(["-k", "secret-key"]) == 0

        assert SettingsStore().load().credential == "secret-key"

    def test_compress_reports_each_file_and_summary(
        self, make_png, temp_dir: Path, capsys, fake_server
    ):
        """测试输出每个文件的结果和汇总"""
        make_png("a.png")
        (temp_dir / "b.txt").write_text("text")

        code = main(["-k", "secret-key", str(temp_dir / "a.png"), str(temp_dir / "b.txt")])

        out = capsys.readouterr().out
        assert code == 0
        assert "a_tiny.png" in out
        assert "-75.0%" in out
        assert (temp_dir / "a_tiny.png").exists()
        assert len(fake_server.posts) == 1

    def test_partial_failure_still_exits_zero(
        self, make_png, temp_dir: Path, capsys, fake_server
    ):
        """测试部分失败时退出码为0"""
        make_png("ok.png")
        make_png("bad.png")
        fake_server.rejections["bad.png"] = ("BadSignature", "Does not appear to be a PNG")
        SettingsStore().update(credential="secret-key")

        code = main(["-r", str(temp_dir)])

        captured = capsys.readouterr()
        assert code == 0
        assert "BadSignature: Does not appear to be a PNG" in captured.err
        assert "成功 1，失败 1" in captured.out

    def test_overrides_are_not_persisted(self, make_jpeg, temp_dir: Path):
        """测试命令行选项不写入设置文件"""
        make_jpeg("a.jpg")
        SettingsStore().update(credential="secret-key")

        assert main(["-n", "--postfix=-min", str(temp_dir)]) == 0

        assert (temp_dir / "a-min.jpg").exists()
        stored = SettingsStore().load()
        assert stored.allow_nonpng is False
        assert stored.postfix == "_tiny"

    def test_no_files_found(self, temp_dir: Path, capsys):
        """测试未找到文件"""
        SettingsStore().update(credential="secret-key")

        assert main([str(temp_dir / "*.png")]) == 0

        assert "未找到" in capsys.readouterr().out

    def test_version(self, capsys):
        """测试版本信息"""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "py-tinypng" in capsys.readouterr().out


class TestMCPServer:
    """MCP服务器功能测试"""

    def test_mcp_server_imports(self):
        """测试MCP服务器模块导入"""
        from py_tinypng.mcp_server import mcp

        assert mcp is not None

    def test_mcp_core_tools(self):
        """测试MCP核心工具"""
        from py_tinypng.mcp_server import compress_files

        assert compress_files is not None
        assert hasattr(compress_files, "name")
        assert compress_files.name == "compress_files"

    def test_batch_response_shape(self, make_png, settings, engine_factory):
        """测试批量结果响应格式"""
        from py_tinypng.mcp_server import MCPResponseBuilder

        make_png("a.png")
        result = TinyPNGCompressor(settings, engine_factory=engine_factory).compress(
            [str(make_png("b.png").parent)]
        )

        response = MCPResponseBuilder.batch(result)

        assert response["success"] is True
        assert response["total_files"] == 2
        assert {r["status"] for r in response["results"]} == {"succeeded"}
