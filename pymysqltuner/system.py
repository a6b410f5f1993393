"""
Module to gather facts about the machine running the tuner
"""

import platform
import psutil as psu
import typing as typ
import pymysqltuner.tuner as tuner

PHYSICAL_MEMORY_PROMPT: str = u"How much physical memory is on the server (in megabytes)?"
SWAP_MEMORY_PROMPT: str = u"How much swap space is on the server (in megabytes)?"


class SystemInfo:
    """Memory and architecture of this machine"""

    def physical_memory(self) -> int:
        return psu.virtual_memory().total

    def virtual_memory(self) -> int:
        return psu.virtual_memory().total + psu.swap_memory().total

    def is_64bit(self) -> bool:
        arch_bit: str = platform.architecture()[0]
        return u"64" in arch_bit or platform.machine().endswith(u"64")


class OptionPrompt:
    def __init__(self, option: tuner.Option, ask: typ.Callable[[str], str] = input) -> None:
        """Answers memory questions from options, asking operator otherwise

        :param tuner.Option option: options object
        :param typ.Callable[[str], str] ask: reads answer from operator
        """
        self.option: tuner.Option = option
        self.ask: typ.Callable[[str], str] = ask

    def ask_number(self, prompt: str) -> typ.Optional[int]:
        """Asks for a whole number

        :param str prompt: question shown to operator
        :return typ.Optional[int]: answer, None when unanswered or not a number
        """
        forced: typ.Dict[str, int] = {
            PHYSICAL_MEMORY_PROMPT: self.option.force_mem,
            SWAP_MEMORY_PROMPT: self.option.force_swap,
        }
        if forced.get(prompt) is not None:
            return forced[prompt]

        if self.option.no_ask:
            return None

        # Closed or piped stdin counts as no answer
        try:
            answer: str = self.ask(f"{prompt} ").strip()
        except EOFError:
            return None

        if not answer.isdigit():
            return None

        return int(answer)
