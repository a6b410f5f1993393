"""
Module with the sinks receiving diagnostic events
"""

import abc
import json
import queue
import threading
import typing as typ
import pymysqltuner.errors as errors
import pymysqltuner.fancy_print as fp
import pymysqltuner.tuner as tuner


class Reporter(abc.ABC):
    """Receives diagnostic events in emission order"""

    @abc.abstractmethod
    def emit(self, event: tuner.DiagnosticEvent) -> None:
        """Delivers single event

        :param tuner.DiagnosticEvent event:
        :return:
        """

    @abc.abstractmethod
    def set_progress(self, complete: bool) -> None:
        """Signals whether scan finished successfully

        :param bool complete: False while incomplete or after failure
        :return:
        """

    def format_print(self, line: str, style: tuner.Status = tuner.Status.INFO) -> None:
        self.emit(tuner.DiagnosticEvent(style, line))


class CollectingReporter(Reporter):
    def __init__(self) -> None:
        self.events: typ.List[tuner.DiagnosticEvent] = []
        self.progress: typ.List[bool] = []

    def emit(self, event: tuner.DiagnosticEvent) -> None:
        self.events.append(event)

    def set_progress(self, complete: bool) -> None:
        self.progress.append(complete)

    def texts(self, level: tuner.Status = None) -> typ.List[str]:
        """Texts of collected events

        :param tuner.Status level: only events of this level when given
        :return typ.List[str]:
        """
        return [
            event.text
            for event in self.events
            if level is None or event.level is level
        ]


class ConsoleReporter(Reporter):
    def __init__(self, option: tuner.Option) -> None:
        """Prints events to the terminal, or as JSON once scan ends

        :param tuner.Option option: options object
        """
        self.option: tuner.Option = option
        self.events: typ.List[tuner.DiagnosticEvent] = []

    def emit(self, event: tuner.DiagnosticEvent) -> None:
        self.events.append(event)

        formats: typ.Dict[tuner.Status, typ.Tuple[bool, str]] = {
            tuner.Status.PASS: (self.option.no_good, self.option.good_out),
            tuner.Status.FAIL: (self.option.no_bad, self.option.bad_out),
            tuner.Status.INFO: (self.option.no_info, self.option.info_out),
            tuner.Status.RECOMMENDATION: (False, self.option.recommend_out),
        }
        no_format, format_out = formats[event.level]
        fp.format_print(event.text, no_format, format_out, self.option.silent, self.option.json)

    def subheader(self, line: str, line_spaces: int = 8, line_total: int = 100) -> None:
        """Prints section title padded with dashes, not recorded as event

        :param str line: subheader title
        :param int line_spaces: dashes before title
        :param int line_total: total length of line
        :return:
        """
        line_end: str = u"-" * (line_total - len(line) - 2 - line_spaces)
        fp.pretty_print(u" ", self.option.silent, self.option.json)
        fp.pretty_print(u" ".join((u"-" * line_spaces, line, line_end)), self.option.silent, self.option.json)

    def set_progress(self, complete: bool) -> None:
        if not self.option.json:
            return

        result: typ.Dict[str, typ.Any] = {
            u"events": [
                {u"level": event.level.value, u"text": event.text}
                for event in self.events
            ],
            u"complete": complete,
        }
        if self.option.pretty_json:
            print(json.dumps(result, sort_keys=True, indent=4))
        else:
            print(json.dumps(result))


class QueueReporter(Reporter):
    def __init__(self, target: Reporter) -> None:
        """Marshals events from a worker thread to the thread owning target

        Worker threads call emit and set_progress, the owning thread calls
        drain to deliver what was queued.

        :param Reporter target: reporter owned by the draining thread
        """
        self.target: Reporter = target
        self._queue: queue.Queue = queue.Queue()
        self._closed: threading.Event = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """Tears sink down, later emits cancel the scan"""
        self._closed.set()

    def emit(self, event: tuner.DiagnosticEvent) -> None:
        if self.closed:
            raise errors.CancelledByCaller(u"Reporter was closed")
        self._queue.put((self.target.emit, event))

    def set_progress(self, complete: bool) -> None:
        if self.closed:
            raise errors.CancelledByCaller(u"Reporter was closed")
        self._queue.put((self.target.set_progress, complete))

    def drain(self, timeout: float = None) -> int:
        """Delivers queued items to target on calling thread

        :param float timeout: seconds to wait for the first item, None to not wait
        :return int: number of delivered items
        """
        delivered: int = 0
        block: bool = timeout is not None
        while True:
            try:
                deliver, item = self._queue.get(block=block, timeout=timeout)
            except queue.Empty:
                return delivered
            deliver(item)
            delivered += 1
            block = False
