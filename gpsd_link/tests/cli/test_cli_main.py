# gpsd_link/tests/cli/test_cli_main.py
from __future__ import annotations

import logging
import queue

import pytest

import gpsd_link.cli.commands as commands_mod
from gpsd_link.cli.args import parse_args
from gpsd_link.cli.main import main
from gpsd_link.runtime import GpsdConnection, GpsdManager
from gpsd_link.transport.base import Transport
from gpsd_link.transport.errors import TransportOpenError

VERSION_LINE = b'{"class":"VERSION","release":"3.25","rev":"3.25","proto_major":3,"proto_minor":15}\n'
DEVICES_LINE = (
    b'{"class":"DEVICES","devices":[{"class":"DEVICE","path":"/dev/ttyACM0",'
    b'"driver":"u-blox","activated":"2024-01-01T00:00:00.000Z","bps":9600}]}\n'
)


class ScriptedTransport(Transport):
    """Answers each written command with a canned reply."""

    def __init__(self, replies=None, *, fail_open=None):
        self.replies = dict(replies or {})
        self.fail_open = fail_open
        self.writes = []
        self._rx: "queue.Queue[bytes]" = queue.Queue()

    def open(self) -> None:
        if self.fail_open is not None:
            raise self.fail_open

    def close(self) -> None:
        return None

    def read(self, n: int) -> bytes:
        try:
            return self._rx.get(timeout=0.01)
        except queue.Empty:
            return b""

    def write(self, data: bytes) -> int:
        self.writes.append(data)
        reply = self.replies.get(data)
        if reply is not None:
            self._rx.put(reply)
        return len(data)


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def use_transport(monkeypatch):
    def install(transport: Transport):
        def make_manager(settings):
            return GpsdManager(settings, transport_factory=lambda remote, req: transport)

        monkeypatch.setattr(commands_mod, "GpsdManager", make_manager)
        return transport

    return install


def test_parse_args_defaults():
    args = parse_args(["watch", "--secs", "2", "--class", "tpv", "--class", "SKY"])
    assert args.cmd == "watch"
    assert args.secs == 2.0
    assert args.classes == ["tpv", "SKY"]
    assert args.host is None
    assert args.port is None
    assert args.pull is False


def test_parse_args_rejects_bad_port():
    with pytest.raises(SystemExit):
        parse_args(["version", "--port", "70000"])


def test_version_prints_release(use_transport, capsys):
    t = use_transport(ScriptedTransport({b"?VERSION;\n": VERSION_LINE}))

    rc = main(["version", "--host", "gps.test", "--timeout", "1"])

    assert rc == 0
    assert t.writes[0] == b"?VERSION;\n"
    assert "gpsd 3.25 (rev 3.25), protocol 3.15" in capsys.readouterr().out


def test_devices_lists_paths(use_transport, capsys):
    use_transport(ScriptedTransport({b"?DEVICES;\n": DEVICES_LINE}))

    assert main(["devices", "--timeout", "1"]) == 0
    out = capsys.readouterr().out
    assert "path=/dev/ttyACM0 driver=u-blox bps=9600 active" in out


def test_error_reply_is_reported(use_transport, capsys):
    use_transport(
        ScriptedTransport({b"?VERSION;\n": b'{"class":"ERROR","message":"Unrecognized request"}\n'})
    )

    assert main(["version", "--timeout", "1"]) == 1
    assert "ERROR: gpsd reported an error: Unrecognized request" in capsys.readouterr().out


def test_connect_failure_prints_hint(use_transport, capsys):
    use_transport(ScriptedTransport(fail_open=TransportOpenError("refused")))

    rc = main(["version", "--port", "2948", "--connect-timeout", "1"])

    assert rc == 1
    out = capsys.readouterr().out
    assert "ERROR: Cannot connect to gpsd at localhost:2948" in out
    assert "Hint:" in out


def test_missing_config_file_is_reported(tmp_path, capsys):
    rc = main(["version", "--config", str(tmp_path / "missing.yml")])
    assert rc == 1
    assert "ERROR: Settings file not found" in capsys.readouterr().out


def test_watch_prints_filtered_sentences(use_transport, capsys, tmp_path):
    stream = (
        b'{"class":"TPV","mode":3,"lat":1.0,"lon":2.0}\n'
        b'{"class":"SKY","satellites":[]}\n'
        b'{"class":"FOO"}\n'
    )
    t = use_transport(ScriptedTransport({b'?WATCH={"enable":true,"json":true}\n': stream}))

    log_file = tmp_path / "logs" / "gpsd-link.log"
    rc = main(["watch", "--secs", "0.3", "--class", "tpv", "--class", "FOO", "--log-file", str(log_file)])

    assert rc == 0
    out = capsys.readouterr().out
    assert 'TPV {"class":"TPV","mode":3,"lat":1.0,"lon":2.0}' in out
    assert 'UNKNOWN {"class":"FOO"}' in out
    assert "SKY" not in out
    assert t.writes[-1] == b'?WATCH={"enable":false}\n'
    assert log_file.parent.is_dir()


def test_watch_pull_grants_one_read_per_delivery(use_transport, capsys, monkeypatch):
    stream = (
        b'{"class":"TPV","mode":3,"lat":1.0,"lon":2.0}\n'
        b'{"class":"SKY","satellites":[]}\n'
        b'{"class":"TPV","mode":3,"lat":1.5,"lon":2.5}\n'
    )
    use_transport(ScriptedTransport({b'?WATCH={"enable":true,"json":true}\n': stream}))

    grants = []
    resume = GpsdConnection.resume_reading

    def counting_resume(self):
        grants.append(1)
        resume(self)

    monkeypatch.setattr(GpsdConnection, "resume_reading", counting_resume)

    assert main(["watch", "--pull", "--secs", "0.3"]) == 0

    lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith(("TPV", "SKY"))]
    assert len(lines) == 3
    # one grant for the delivery, one more once it was consumed
    assert 1 <= len(grants) <= 2
