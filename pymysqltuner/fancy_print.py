"""
Module with modified print functions to allow color changing
"""

import pymysqltuner.tuner as tuner


def pretty_print(line: str, silent: bool, json: bool) -> None:
    """Base function for printing

    :param str line: string to be printed
    :param bool silent: whether to print
    :param bool json: whether to output as json only
    :return:
    """
    if not (silent or json):
        print(line)


def format_print(line: str, no_format: bool, format_out: str, silent: bool, json: bool) -> None:
    """Prints color formatted messages

    :param str line: input message
    :param bool no_format: whether to skip this kind of message
    :param str format_out: formatting starter
    :param bool silent: whether to print
    :param bool json: whether to output as json only
    :return:
    """
    if not no_format:
        format_line: str = u" ".join((format_out, line))
        pretty_print(format_line, silent, json)


def debug_print(line: str, option: tuner.Option) -> None:
    """Prints developer tracing when debug is enabled

    :param str line: input message
    :param tuner.Option option: options object
    :return:
    """
    if option is not None and option.debug:
        format_print(line, False, option.debug_out, option.silent, option.json)
