"""
Native activities callable from scripts.

Each activity takes the evaluated string arguments of a call and returns a
string result. Failures are reported by raising ``ActivityError``; the
interpreter locates them at the call site. Every successful side effect
is recorded through the injected activity logger.

Registered functions:
    file.create <type> <path>             type is "file" or "dir"
    file.modify <path> <new contents>
    file.delete <path>
    process.spawn <cmd> [args, ...]
    network.transmit <protocol> <dest> <message>   protocol is "tcp" or "udp"
    join [args, ...]
    print <message>
"""

from __future__ import annotations

import ipaddress
import os
import socket
import stat
import subprocess
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .logger import NullActivityLogger
from .registry import Registry
from .script.errors import ActivityError


OK = "ok"


# =============================================================================
# Activity records
# =============================================================================

@dataclass
class FileActivity:
    """A file or directory was created, modified or deleted."""
    path: str
    activity_descriptor: str    # create, modify, delete

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "file",
            "path": self.path,
            "activity_descriptor": self.activity_descriptor,
        }


@dataclass
class ProcessSpawnActivity:
    """A child process was started."""
    name: str
    command_line: List[str]
    pid: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "process",
            "name": self.name,
            "command_line": self.command_line,
            "pid": self.pid,
        }


@dataclass
class NetworkActivity:
    """A payload was sent over the network."""
    src: str
    dest: str
    sent: int
    protocol: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "network",
            "src": self.src,
            "dest": self.dest,
            "sent": self.sent,
            "protocol": self.protocol,
        }


# =============================================================================
# Helpers
# =============================================================================

_FILE_KINDS = [
    (stat.S_ISLNK, "symlink"),
    (stat.S_ISFIFO, "fifo"),
    (stat.S_ISSOCK, "socket"),
    (stat.S_ISBLK, "block device"),
    (stat.S_ISCHR, "character device"),
]


def _describe_mode(mode: int) -> str:
    for test, name in _FILE_KINDS:
        if test(mode):
            return name
    return f"mode {stat.S_IFMT(mode):o}"


def _split_address(dest: str) -> Tuple[str, int]:
    """Split ``host:port`` (or ``[v6]:port``) into its parts."""
    host, sep, port = dest.rpartition(":")
    if not sep or not host or not port.isdigit() or int(port) > 65535:
        raise ActivityError(f"invalid socket address syntax: {dest}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, int(port)


def _format_address(address: tuple) -> str:
    host, port = address[0], address[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


# =============================================================================
# Activities
# =============================================================================

class Activities:
    """
    Native activity implementations bound to one activity logger.
    """

    def __init__(self, logger=None):
        self.logger = logger if logger is not None else NullActivityLogger()

    def file_create(self, args: List[str]) -> str:
        """Create a regular file (truncating it) or a single directory."""
        file_type, path = args
        try:
            if file_type == "file":
                with open(path, "w"):
                    pass
            elif file_type == "dir":
                os.mkdir(path)
            else:
                raise ActivityError(f"invalid file type: {file_type}")
        except (OSError, ValueError) as e:
            raise ActivityError(str(e)) from e

        self.logger.log(FileActivity(path, "create"))
        return OK

    def file_modify(self, args: List[str]) -> str:
        """Replace a file's contents."""
        path, contents = args
        try:
            with open(path, "wb") as fh:
                fh.write(contents.encode("utf-8"))
        except (OSError, ValueError) as e:
            raise ActivityError(str(e)) from e

        self.logger.log(FileActivity(path, "modify"))
        return OK

    def file_delete(self, args: List[str]) -> str:
        """Delete an empty directory or a regular file."""
        path, = args
        try:
            mode = os.stat(path).st_mode
            if stat.S_ISDIR(mode):
                os.rmdir(path)
            elif stat.S_ISREG(mode):
                os.remove(path)
            else:
                raise ActivityError(
                    f"unable to delete file type: {_describe_mode(mode)}"
                )
        except (OSError, ValueError) as e:
            raise ActivityError(str(e)) from e

        self.logger.log(FileActivity(path, "delete"))
        return OK

    def process_spawn(self, args: List[str]) -> str:
        """Start a process without waiting for it to finish.

        The child is never waited on here. It runs in its own session so a
        signal to the runner's process group does not reach it; the exit
        status is collected by ``subprocess`` the next time a process is
        started, or stays a zombie until the runner exits.
        """
        try:
            proc = subprocess.Popen(args, start_new_session=True)
        except (OSError, ValueError) as e:
            raise ActivityError(str(e)) from e

        self.logger.log(ProcessSpawnActivity(args[0], list(args), proc.pid))
        return OK

    def network_transmit(self, args: List[str]) -> str:
        """Send a message over TCP or UDP."""
        protocol, dest, message = args
        payload = message.encode("utf-8")

        if protocol == "tcp":
            host, port = _split_address(dest)
            try:
                with socket.create_connection((host, port)) as sock:
                    sock.sendall(payload)
                    src = _format_address(sock.getsockname())
            except (OSError, ValueError) as e:
                raise ActivityError(str(e)) from e
        elif protocol == "udp":
            host, port = _split_address(dest)
            try:
                ip = ipaddress.ip_address(host)
            except ValueError as e:
                raise ActivityError(str(e)) from e
            dest = _format_address((str(ip), port))
            try:
                with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                    sock.bind(("0.0.0.0", 0))
                    sock.sendto(payload, (str(ip), port))
                    src = _format_address(sock.getsockname())
            except (OSError, ValueError) as e:
                raise ActivityError(str(e)) from e
        else:
            raise ActivityError(f"invalid network protocol: {protocol}")

        self.logger.log(NetworkActivity(src, dest, len(payload), protocol))
        return OK

    def join(self, args: List[str]) -> str:
        """Concatenate all arguments."""
        return "".join(args)

    def print(self, args: List[str]) -> str:
        """Write each argument on its own line."""
        for arg in args:
            print(arg)
        return OK


def register(registry: Registry, logger=None) -> Activities:
    """
    Register every native activity in ``registry``.

    Args:
        registry: Registry to populate
        logger: Activity logger receiving a record per side effect;
            records are discarded when omitted

    Returns:
        The bound activity set
    """
    activities = Activities(logger)
    registry.register("file.create", ["type", "path"], activities.file_create)
    registry.register("file.modify", ["path", "new contents"], activities.file_modify)
    registry.register("file.delete", ["path"], activities.file_delete)
    registry.register("process.spawn", ["cmd", "*args"], activities.process_spawn)
    registry.register(
        "network.transmit",
        ["protocol", "dest", "message"],
        activities.network_transmit,
    )
    registry.register("join", ["*args"], activities.join)
    registry.register("print", ["message"], activities.print)
    return activities


def default_registry(logger=None) -> Registry:
    """Build a registry holding every native activity."""
    registry = Registry()
    register(registry, logger)
    return registry
