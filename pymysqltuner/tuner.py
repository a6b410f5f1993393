"""
Module to contain the tuner classes
"""

import enum
import re
import typing as typ
import pymysqltuner.errors as errors
import pymysqltuner.util as util

MetricsSet = typ.Dict[str, int]


class Option:
    def __init__(self) -> None:
        self.silent: bool = False
        self._no_color: bool = False
        self.no_good: bool = False
        self.no_info: bool = False
        self.no_bad: bool = False
        self.debug: bool = False
        self.good_out: str = None
        self.bad_out: str = None
        self.info_out: str = None
        self.recommend_out: str = None
        self.debug_out: str = None
        self.force_mem: int = None
        self.force_swap: int = None
        self.no_ask: bool = False
        self.host: str = None
        self.port: int = None
        self.user: str = None
        self.password: str = None
        self.ssl: bool = False
        self.skip_size: bool = False
        self.skip_password: bool = False
        self.json: bool = False
        self.pretty_json: bool = False
        self.config_file: str = None
        self.policy_file: str = None
        self.policy_url: str = None

        self.no_color = False

    @property
    def no_color(self) -> bool:
        return self._no_color

    @no_color.setter
    def no_color(self, value: bool) -> None:
        self._no_color = value

        if not self._no_color:
            self.good_out = u"[\033[0;32mOK\033[0m]"
            self.bad_out = u"[\033[0;31m!!\033[0m]"
            self.info_out = u"[\033[0;34m--\033[0m]"
            self.recommend_out = u"[\033[0;33m>>\033[0m]"
            self.debug_out = u"[\033[0;31mDG\033[0m]"
        else:
            self.good_out = u"[OK]"
            self.bad_out = u"[!!]"
            self.info_out = u"[--]"
            self.recommend_out = u"[>>]"
            self.debug_out = u"[DG]"


class Status(enum.Enum):
    """Level of a diagnostic message"""
    INFO = u"Info"
    PASS = u"Pass"
    FAIL = u"Fail"
    RECOMMENDATION = u"Recommendation"


class DiagnosticEvent(typ.NamedTuple):
    level: Status
    text: str


class Version(typ.NamedTuple):
    major: int = 0
    minor: int = 0
    micro: int = 0

    @classmethod
    def parse(cls, version: str) -> "Version":
        """Parses version string reported by the server

        Build suffixes after a hyphen are dropped along with anything
        that is not a digit or a dot, e.g. 8.0.34-log -> 8.0.34

        :param str version: version variable
        :return Version: structured version
        """
        numeric: str = re.sub(r"[^.0-9]", u"", version.split(u"-")[0])
        parts: typ.List[int] = [
            int(part)
            for part in numeric.split(u".")
            if part
        ][:3]
        parts.extend([0] * (3 - len(parts)))

        return cls(*parts)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.micro}"


class ServerSnapshot:
    def __init__(
        self,
        host: str = u"localhost",
        port: int = 3306,
        user_name: str = None,
        password: str = None,
        use_encryption: bool = False
    ) -> None:
        """Initializes an empty snapshot of a server

        :param str host: server host name or address
        :param int port: server port
        :param str user_name: login name
        :param str password: login password
        :param bool use_encryption: whether the connection uses TLS
        """
        self.host: str = host or u"localhost"
        self.port: int = port or 3306
        self.user_name: str = user_name
        self.password: str = password
        self.use_encryption: bool = use_encryption

        self.variables: typ.Dict[str, str] = {}
        self.status: typ.Dict[str, str] = {}
        self.engine_table_count: typ.Dict[str, int] = {}
        self.engine_data_size: typ.Dict[str, int] = {}
        self.fragmented_table_count: int = 0
        self.total_myisam_indexes: typ.Optional[int] = None
        self.physical_memory: int = 0
        self.swap_memory: int = 0
        self.replication_status: typ.Dict[str, str] = {}
        self.slave_count: int = 0

    @property
    def is_local(self) -> bool:
        """Whether server runs on this machine

        :return bool:
        """
        return self.host.lower() in (u"localhost", u"127.0.0.1", u"::1")

    @property
    def version(self) -> Version:
        """Returns parsed server version

        :return Version: server version
        """
        if u"version" not in self.variables:
            raise errors.MissingPrecondition(u"Server variables were loaded without a version")

        return Version.parse(self.variables[u"version"])

    def variable(self, name: str, default: str = u"") -> str:
        return self.variables.get(name, default)

    def has_variable(self, name: str) -> bool:
        return name in self.variables

    def int_variable(self, name: str) -> int:
        return util.to_int(self.variables.get(name))

    def int_status(self, name: str) -> int:
        return util.to_int(self.status.get(name))

    def is_enabled(self, name: str) -> bool:
        """Whether a have_* style variable reports YES

        :param str name: variable name
        :return bool:
        """
        return self.variables.get(name) == u"YES"
