"""
Module with the release support policy used to judge server versions
"""

import datetime as dt
import enum
import os.path as osp
import requests as req
import typing as typ
import yaml
import pymysqltuner.fancy_print as fp
import pymysqltuner.tuner as tuner

POLICY_FILE: str = osp.join(osp.dirname(__file__), u"data", u"version-policy.yaml")


class Support(enum.Enum):
    SUPPORTED = u"supported"
    EOL = u"eol"
    UNSUPPORTED = u"unsupported"


class VersionPolicy:
    def __init__(
        self,
        releases: typ.Dict[typ.Tuple[int, int], typ.Optional[dt.date]],
        eol_major: int = 4
    ) -> None:
        """Initializes policy

        :param typ.Dict[typ.Tuple[int, int], typ.Optional[dt.date]] releases:
            end of support per (major, minor) branch, None while no end is announced
        :param int eol_major: unknown branches up to this major version are EOL
        """
        self.releases: typ.Dict[typ.Tuple[int, int], typ.Optional[dt.date]] = releases
        self.eol_major: int = eol_major

    @classmethod
    def from_dict(cls, data: typ.Dict[str, typ.Any]) -> "VersionPolicy":
        """Builds policy from parsed YAML document

        :param typ.Dict[str, typ.Any] data: document with eol_major and releases keys
        :return VersionPolicy:
        """
        releases: typ.Dict[typ.Tuple[int, int], typ.Optional[dt.date]] = {}
        for release in data.get(u"releases") or []:
            major, minor = (int(part) for part in str(release[u"version"]).split(u".")[:2])
            end_of_life = release.get(u"end_of_life")
            if isinstance(end_of_life, str):
                end_of_life = dt.date.fromisoformat(end_of_life)
            releases[(major, minor)] = end_of_life

        return cls(releases, eol_major=int(data.get(u"eol_major", 4)))

    def classify(self, version: tuner.Version, today: dt.date) -> Support:
        """Classifies server version

        :param tuner.Version version: server version
        :param dt.date today: date to judge support against
        :return Support:
        """
        branch: typ.Tuple[int, int] = (version.major, version.minor)
        if branch in self.releases:
            end_of_life: typ.Optional[dt.date] = self.releases[branch]
            if end_of_life is None or today <= end_of_life:
                return Support.SUPPORTED
            return Support.EOL

        if version.major <= self.eol_major:
            return Support.EOL

        return Support.UNSUPPORTED


def load_policy(policy_file: str = None) -> VersionPolicy:
    """Reads policy from YAML file

    :param str policy_file: path to policy, bundled policy when None
    :return VersionPolicy:
    """
    with open(policy_file or POLICY_FILE, mode=u"r", encoding=u"utf-8") as pf:
        return VersionPolicy.from_dict(yaml.safe_load(pf) or {})


def fetch_policy(url: str, option: tuner.Option = None) -> VersionPolicy:
    """Downloads policy, falling back to bundled policy when unreachable

    :param str url: location of policy YAML
    :param tuner.Option option: options object
    :return VersionPolicy:
    """
    try:
        response: req.Response = req.get(url, timeout=10)
        response.raise_for_status()
    except req.RequestException as error:
        fp.debug_print(f"Unable to fetch version policy from {url}: {error}", option)
        return load_policy()

    return VersionPolicy.from_dict(yaml.safe_load(response.text) or {})
