"""
Reviews a MySQL installation
Allows tuning to increase performance and stability
"""

import argparse
import platform
import sys
import typing as typ
import pymysqltuner as pt
import pymysqltuner.database as database
import pymysqltuner.errors as errors
import pymysqltuner.fancy_print as fp
import pymysqltuner.policy as policy
import pymysqltuner.reporter as rp
import pymysqltuner.system as system
import pymysqltuner.tuner as tuner
import pymysqltuner.util as util


def parse_args(args: typ.Sequence[str] = None) -> tuner.Option:
    """Reads command line into options object

    :param typ.Sequence[str] args: command line, sys.argv when None
    :return tuner.Option: options object
    """
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description=u"Reviews a MySQL installation and recommends tuning changes"
    )
    parser.add_argument(u"--host", help=u"Host to connect to for data retrieval")
    parser.add_argument(u"--port", type=int, help=u"Port to use for connection (default: 3306)")
    parser.add_argument(u"--user", help=u"Username to use for authentication")
    parser.add_argument(u"--pass", dest=u"password", help=u"Password to use for authentication")
    parser.add_argument(u"--ssl", action=u"store_true", help=u"Require an encrypted connection")
    parser.add_argument(u"--config", dest=u"config_file", help=u"YAML file with connection parameters")
    parser.add_argument(u"--force-mem", type=int, help=u"Amount of RAM installed in megabytes")
    parser.add_argument(u"--force-swap", type=int, help=u"Amount of swap memory configured in megabytes")
    parser.add_argument(u"--no-ask", action=u"store_true", help=u"Don't ask for memory sizes of remote servers")
    parser.add_argument(u"--skip-size", action=u"store_true", help=u"Don't enumerate tables and their types/sizes")
    parser.add_argument(u"--skip-password", action=u"store_true", help=u"Don't perform checks on user passwords")
    parser.add_argument(u"--policy-file", help=u"YAML file with the version support policy")
    parser.add_argument(u"--policy-url", help=u"URL of YAML version support policy")
    parser.add_argument(u"--silent", action=u"store_true", help=u"Don't output anything on screen")
    parser.add_argument(u"--nogood", dest=u"no_good", action=u"store_true", help=u"Remove OK responses")
    parser.add_argument(u"--nobad", dest=u"no_bad", action=u"store_true", help=u"Remove negative/suggestion responses")
    parser.add_argument(u"--noinfo", dest=u"no_info", action=u"store_true", help=u"Remove informational responses")
    parser.add_argument(u"--nocolor", dest=u"no_color", action=u"store_true", help=u"Don't print output in color")
    parser.add_argument(u"--debug", action=u"store_true", help=u"Print debug information")
    parser.add_argument(u"--json", action=u"store_true", help=u"Print result as JSON string")
    parser.add_argument(u"--prettyjson", dest=u"pretty_json", action=u"store_true", help=u"Print result as human readable JSON")

    namespace: argparse.Namespace = parser.parse_args(args)

    option: tuner.Option = tuner.Option()
    for name, value in vars(namespace).items():
        if value is not None:
            setattr(option, name, value)
    # Pretty JSON implies JSON
    option.json = option.json or option.pretty_json

    return option


def main(args: typ.Sequence[str] = None) -> int:
    option: tuner.Option = parse_args(args)

    os_name: str = platform.system()
    if os_name == u"Windows":
        fp.pretty_print(f"* Windows OS ({os_name}) is not fully supported", option.silent, option.json)

    params: typ.Dict[str, typ.Any] = util.connection_params(
        option.config_file,
        host=option.host,
        username=option.user,
        password=option.password,
        port=option.port
    )
    engine = util.create_engine(params, ssl=option.ssl)

    if option.policy_url:
        version_policy: policy.VersionPolicy = policy.fetch_policy(option.policy_url, option)
    else:
        version_policy: policy.VersionPolicy = policy.load_policy(option.policy_file)

    server: tuner.ServerSnapshot = tuner.ServerSnapshot(
        host=params[u"host"],
        port=params[u"port"],
        user_name=params[u"username"],
        password=params[u"password"],
        use_encryption=option.ssl
    )

    reporter: rp.ConsoleReporter = rp.ConsoleReporter(option)
    reporter.subheader(u"MySQL Tuning Report")
    try:
        pt.calculate(
            server,
            database.DataAccess(engine, option),
            system.SystemInfo(),
            system.OptionPrompt(option),
            reporter,
            option=option,
            version_policy=version_policy
        )
    except errors.TunerError:
        return 1
    finally:
        engine.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(main())
