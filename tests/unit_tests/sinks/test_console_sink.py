"""
ConsoleSink 单元测试
"""

from __future__ import annotations

import io
import threading

from multilog.event import LogEvent
from multilog.level import Level
from multilog.sinks import ConsoleSink, _lock_for_stream


def event(message: str = "Info message", level: Level = Level.INFO, **kwargs) -> LogEvent:
    return LogEvent(level=level, message=message, function_name="run", line_num=15, file_name="main", **kwargs)


class TestConsoleSink:
    """控制台输出测试"""

    def test_writes_to_stdout_by_default(self, capsys) -> None:
        """默认写入 stdout，条目之间有空行"""
        ConsoleSink().deliver(event(params={"id": 102}))

        out = capsys.readouterr().out
        assert out.startswith("💜 ")
        assert " INFO main->run:15 💜\n\tInfo message\n    id: 102\n\n" in out

    def test_custom_stream_without_tty_has_no_color(self) -> None:
        stream = io.StringIO()
        ConsoleSink(stream=stream).deliver(event(level=Level.ERROR, message="boom"))

        output = stream.getvalue()
        assert "\033[" not in output
        assert output.endswith("\tboom\n\n")

    def test_color_can_be_forced(self) -> None:
        stream = io.StringIO()
        ConsoleSink(stream=stream, use_color=True).deliver(event(level=Level.WARNING))
        assert "\033[33mWARNING\033[0m" in stream.getvalue()

    def test_concurrent_entries_do_not_interleave(self) -> None:
        """并发写入时每条记录保持完整"""
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, use_color=False)

        def worker(n: int) -> None:
            for i in range(100):
                sink.deliver(event(message=f"worker-{n}-{i}", params={"n": n, "i": i}))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        entries = [chunk for chunk in stream.getvalue().split("\n\n") if chunk]
        assert len(entries) == 600
        for entry in entries:
            header, message, n_line, i_line = entry.split("\n")
            n, i = message.strip().split("-")[1:]
            assert header.startswith("💜 ")
            assert n_line == f"    n: {n}"
            assert i_line == f"    i: {i}"

    def test_closed_stream_is_contained(self) -> None:
        """流已关闭时丢弃条目，不向调用方抛出"""
        stream = io.StringIO()
        stream.close()
        ConsoleSink(stream=stream, use_color=False).deliver(event())

    def test_sinks_on_same_stream_share_lock(self) -> None:
        """同一个流上的多个 sink 共用一把锁"""
        stream = io.StringIO()
        assert _lock_for_stream(stream) is _lock_for_stream(stream)
        assert _lock_for_stream(stream) is not _lock_for_stream(io.StringIO())

    def test_two_sinks_on_one_stream_do_not_interleave(self) -> None:
        stream = io.StringIO()
        sinks = [ConsoleSink(stream=stream, use_color=False) for _ in range(2)]

        def worker(n: int) -> None:
            for i in range(100):
                sinks[n % 2].deliver(event(message=f"worker-{n}-{i}", params={"n": n, "i": i}))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        entries = [chunk for chunk in stream.getvalue().split("\n\n") if chunk]
        assert len(entries) == 600
        for entry in entries:
            header, message, n_line, i_line = entry.split("\n")
            n, i = message.strip().split("-")[1:]
            assert header.startswith("💜 ")
            assert n_line == f"    n: {n}"
            assert i_line == f"    i: {i}"
