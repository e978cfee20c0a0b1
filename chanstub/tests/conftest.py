"""Unit tests configuration file."""

import pytest

from chanstub.generator.types import FileDescriptor, MethodDescriptor, ServiceDescriptor


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


def _method(name, client=False, server=False, input_type="EchoRequest", output_type="EchoResponse"):
    return MethodDescriptor(
        name=name,
        input_type=input_type,
        output_type=output_type,
        client_streaming=client,
        server_streaming=server,
    )


@pytest.fixture
def method():
    """Factory for method descriptors."""
    return _method


@pytest.fixture
def echo_unit():
    """A unit with one service Echo and a single unary method Say."""
    return FileDescriptor(
        name="echo.proto",
        messages=["EchoRequest", "EchoResponse"],
        services=[ServiceDescriptor(name="Echo", methods=[_method("Say")])],
    )


@pytest.fixture
def streams_unit():
    """A packaged unit whose service mixes all call shapes."""
    return FileDescriptor(
        name="demo/streams.proto",
        package="demo.v1",
        go_package="example.com/demo/v1;demov1",
        messages=["demo.v1.EchoRequest", "demo.v1.EchoResponse"],
        services=[
            ServiceDescriptor(
                name="Streamer",
                methods=[
                    _method("Get", input_type=".demo.v1.EchoRequest", output_type=".demo.v1.EchoResponse"),
                    _method("Watch", server=True, input_type=".demo.v1.EchoRequest", output_type=".demo.v1.EchoResponse"),
                    _method("Put", input_type=".demo.v1.EchoRequest", output_type=".demo.v1.EchoResponse"),
                    _method(
                        "Chat",
                        client=True,
                        server=True,
                        input_type=".demo.v1.EchoRequest",
                        output_type=".demo.v1.EchoResponse",
                    ),
                ],
            )
        ],
    )
