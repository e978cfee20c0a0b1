"""Tests for CLI interface."""

import json
import os
import tempfile

from click.testing import CliRunner

from chanstub.generator.cli import cli

FILE_DIR = os.path.dirname(os.path.realpath(__file__))


def describe_gen_command():
    def generates_go_code(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(cli, ["gen", "-i", f"{FILE_DIR}/echo.json", "-o", tmpdir])
            expect(result.exit_code) == 0
            output_file = os.path.join(tmpdir, "example.com", "echo", "echo.pb.grpchan.go")
            expect(os.path.isfile(output_file)) == True
            with open(output_file) as f:
                content = f.read()
            expect(content.startswith("// Code generated by chanstub. DO NOT EDIT.\n")) == True
            expect("// source: echo/echo.proto\n" in content) == True
            expect("func RegisterHandlerEcho(" in content) == True
            expect("func NewEchoChannelClient(" in content) == True

    def honours_paths_option(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(
                cli,
                ["gen", "-i", f"{FILE_DIR}/echo.json", "-o", tmpdir, "--paths", "source_relative"],
            )
            expect(result.exit_code) == 0
            expect(os.path.isfile(os.path.join(tmpdir, "echo", "echo.pb.grpchan.go"))) == True

    def honours_context_option(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(
                cli,
                ["gen", "-i", f"{FILE_DIR}/echo.json", "-o", tmpdir, "--context", "std"],
            )
            expect(result.exit_code) == 0
            with open(os.path.join(tmpdir, "example.com", "echo", "echo.pb.grpchan.go")) as f:
                expect('\t"context"\n' in f.read()) == True

    def fails_with_malformed_descriptor(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(cli, ["gen", "-i", f"{FILE_DIR}/broken.json", "-o", tmpdir])
            expect(result.exit_code) == 1
            expect("Error: broken.proto:" in result.output) == True
            expect(os.listdir(tmpdir)) == []

    def fails_with_missing_input(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["gen", "-i", "/nonexistent/request.json", "-o", "/tmp"])
        expect(result.exit_code) != 0

    def requires_input_option(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["gen"])
        expect(result.exit_code) != 0
        expect("Missing option" in result.output) == True


def describe_plugin_command():
    def answers_request_on_stdout(expect):
        runner = CliRunner()
        with open(f"{FILE_DIR}/echo.json") as f:
            request = f.read()
        result = runner.invoke(cli, ["plugin"], input=request)
        expect(result.exit_code) == 0
        response = json.loads(result.output)
        expect(response["error"]) == None
        expect([f["name"] for f in response["files"]]) == ["example.com/echo/echo.pb.grpchan.go"]

    def reports_errors_in_response(expect):
        runner = CliRunner()
        with open(f"{FILE_DIR}/broken.json") as f:
            request = f.read()
        result = runner.invoke(cli, ["plugin"], input=request)
        expect(result.exit_code) == 0
        response = json.loads(result.output)
        expect(response["files"]) == []
        expect(response["error"].startswith("broken.proto: ")) == True


def describe_info_command():
    def lists_methods(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "-i", f"{FILE_DIR}/echo.json"])
        expect(result.exit_code) == 0
        expect("echo/echo.proto" in result.output) == True
        expect("Say" in result.output) == True
        expect("server_streaming" in result.output) == True

    def outputs_json(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "-i", f"{FILE_DIR}/echo.json", "--json"])
        expect(result.exit_code) == 0
        data = json.loads(result.output)
        rows = data["echo/echo.proto"]
        expect([r["method"] for r in rows]) == ["Say", "Listen", "Chat"]
        expect([r["stream_index"] for r in rows]) == [None, 0, 1]
        expect(rows[2]["shape"]) == "client_or_bidi_streaming"
        expect(rows[0]["path"]) == "/echo.Echo/Say"


def describe_main_group():
    def shows_help(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        expect(result.exit_code) == 0
        expect("gen" in result.output) == True
        expect("plugin" in result.output) == True
        expect("info" in result.output) == True
