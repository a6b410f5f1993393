"""
Utilities module for random functions
"""

import contextlib as ctxt
import math
import sqlalchemy as sqla
import sqlalchemy.orm as orm
import typing as typ
import yaml

KIBIBYTE: int = 1024
MEBIBYTE: int = 1024 ** 2
GIBIBYTE: int = 1024 ** 3


def to_int(value: typ.Any) -> int:
    """Parses numeric looking server value, defaulting to 0

    :param typ.Any value: raw value as reported by the server
    :return int: parsed value or 0 when it does not parse
    """
    if value is None:
        return 0

    try:
        return int(value)
    except (TypeError, ValueError):
        pass

    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def to_float(value: typ.Any) -> float:
    """Parses numeric looking server value as float, defaulting to 0

    :param typ.Any value: raw value as reported by the server
    :return float: parsed value or 0 when it does not parse
    """
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def ceil_percentage(value: float, total: float) -> int:
    """Calculates percentage rounded up to nearest integer

    :param float value:
    :param float total: must not be 0
    :return int: percentage
    """
    return int(math.ceil(value / total * 100))


def days_up(uptime: int) -> int:
    """Number of started days in uptime, never less than one

    :param int uptime: uptime in seconds
    :return int: days
    """
    return max(int(math.ceil(uptime / 86400)), 1)


def display_bytes(amount: int) -> str:
    """Converts amount of bytes into string representation
    Rounds to one decimal place

    :param int amount: amount of bytes
    :return str: string representation
    """
    if amount >= GIBIBYTE:
        return f"{amount / GIBIBYTE:.1f}G"
    elif amount >= MEBIBYTE:
        return f"{amount / MEBIBYTE:.1f}M"
    elif amount >= KIBIBYTE:
        return f"{amount / KIBIBYTE:.1f}K"

    return f"{amount}B"


def display_bytes_rounded(amount: int) -> str:
    """Converts amount of bytes into string representation
    Truncates to whole units

    :param int amount: amount of bytes
    :return str: string representation
    """
    if amount >= GIBIBYTE:
        return f"{amount // GIBIBYTE}G"
    elif amount >= MEBIBYTE:
        return f"{amount // MEBIBYTE}M"
    elif amount >= KIBIBYTE:
        return f"{amount // KIBIBYTE}K"

    return f"{amount}B"


def display_rounded(number: typ.Union[int, float]) -> str:
    """Shortens number to nearest power of 1000

    :param typ.Union[int, float] number:
    :return str: string representation
    """
    if number >= 1000 ** 3:
        return f"{int(number / 1000 ** 3)}G"
    elif number >= 1000 ** 2:
        return f"{int(number / 1000 ** 2)}M"
    elif number >= 1000:
        return f"{int(number / 1000)}K"
    elif isinstance(number, float):
        return f"{number:.3f}"

    return f"{number}"


def pretty_uptime(uptime: int) -> str:
    """Parse uptime into human friendly format

    :param int uptime: uptime in seconds
    :return str:
    """
    seconds: int = int(uptime % 60)
    minutes: int = int(uptime % 3600 / 60)
    hours: int = int(uptime % 86400 / 3600)
    days: int = int(uptime / 86400)

    if days > 0:
        hf_uptime: str = f"{days}d {hours}h {minutes}m {seconds}s"
    elif hours > 0:
        hf_uptime: str = f"{hours}h {minutes}m {seconds}s"
    elif minutes > 0:
        hf_uptime: str = f"{minutes}m {seconds}s"
    else:
        hf_uptime: str = f"{seconds}s"

    return hf_uptime


def connection_params(config_file: str = None,
                      host: str = None, username: str = None, password: str = None,
                      port: int = None) -> typ.Dict[str, typ.Any]:
    """Builds connection parameters, command line values override config file

    :param str config_file: YAML file with host, port, username and password keys
    :param str host:
    :param str username:
    :param str password:
    :param int port:
    :return typ.Dict[str, typ.Any]: keyword arguments for sqlalchemy URL
    """
    config: typ.Dict[str, typ.Any] = {}
    if config_file:
        with open(config_file, mode=u"r", encoding=u"utf-8") as cf:
            config = yaml.safe_load(cf) or {}

    return {
        u"drivername": u"mysql+pymysql",
        u"host": host or config.get(u"host") or u"localhost",
        u"username": username or config.get(u"username"),
        u"password": password if password is not None else config.get(u"password"),
        u"port": int(port or config.get(u"port") or 3306),
    }


def create_engine(params: typ.Dict[str, typ.Any], ssl: bool = False) -> sqla.engine.Engine:
    """Creates engine for connection parameters

    :param typ.Dict[str, typ.Any] params: output of connection_params
    :param bool ssl: whether to require an encrypted connection
    :return sqla.engine.Engine:
    """
    url = sqla.engine.URL.create(**params)
    connect_args: typ.Dict[str, typ.Any] = {u"connect_timeout": 30}
    if ssl:
        connect_args[u"ssl"] = {u"check_hostname": False}

    return sqla.create_engine(url, connect_args=connect_args)


@ctxt.contextmanager
def session_scope(engine: sqla.engine.Engine) -> typ.Iterator[orm.Session]:
    """Session generator for databases

    :param sqla.engine.Engine engine: engine object

    :yield: session object
    """
    get_session = orm.scoped_session(orm.sessionmaker(bind=engine))
    session: orm.Session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        get_session.remove()
