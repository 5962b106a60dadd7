# gpsd_link/model/events.py
"""
Events decoded from gpsd JSON sentences.

Optional members that the daemon did not report are None; None never means
zero. Lists missing from a report are empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, ClassVar, List, Optional

from gpsd_link.core.errors import DecodeError

from .base import GpsdEvent, GpsdObject
from .fields import (
    as_object,
    epoch_seconds,
    opt_bool,
    opt_float,
    opt_int,
    opt_list,
    opt_str,
    opt_time,
    req_bool,
    req_int,
    req_list,
    req_str,
    req_time,
)


class FixMode(IntEnum):
    """NMEA fix mode as reported in TPV."""
    NOT_SEEN = 0
    NO_FIX = 1
    TWO_DIMENSIONAL = 2
    THREE_DIMENSIONAL = 3


# ---------------------------------------------------------------------------
# Daemon / device state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Version(GpsdEvent):
    """
    Shipped by the daemon to each client when it first connects.

    ``remote`` is the URL of the remote daemon reporting this version; absent
    for the local daemon.
    """

    classifier: ClassVar[str] = "VERSION"

    release: str
    rev: str
    proto_major: int
    proto_minor: int
    remote: Optional[str] = None

    @property
    def protocol_major(self) -> int:
        return self.proto_major

    @property
    def protocol_minor(self) -> int:
        return self.proto_minor

    @classmethod
    def from_json(cls, value: Any) -> "Version":
        obj = as_object(value, cls.classifier)
        return cls(
            release=req_str(obj, "release"),
            rev=req_str(obj, "rev"),
            proto_major=req_int(obj, "proto_major"),
            proto_minor=req_int(obj, "proto_minor"),
            remote=opt_str(obj, "remote"),
        )


@dataclass(frozen=True)
class Device(GpsdEvent):
    """
    State of a single device.

    Shipped in response to ?DEVICE, inside DEVICES, and unsolicited to
    watchers when a device is added to the pool or deactivated.

    Attributes:
        path: device name; may be omitted when exactly one channel is subscribed.
        activated: activation time; absent when the device is inactive.
        flags: bit vector of packet types seen so far (GPS, RTCM2, RTCM3, AIS).
        driver: gpsd's name for the device driver type.
        subtype: whatever version information the device returned.
        bps: device speed in bits per second.
        parity: N, O or E.
        stopbits: 1 or 2.
        native: 0 for NMEA mode, 1 for alternate (binary) mode.
        cycle: device cycle time in seconds.
        mincycle: minimum cycle time; reported only when the rate is switchable.
    """

    classifier: ClassVar[str] = "DEVICE"

    path: Optional[str] = None
    activated: Optional[datetime] = None
    flags: Optional[int] = None
    driver: Optional[str] = None
    subtype: Optional[str] = None
    bps: Optional[int] = None
    parity: Optional[str] = None
    stopbits: Optional[int] = None
    native: Optional[int] = None
    cycle: Optional[float] = None
    mincycle: Optional[float] = None

    @property
    def active(self) -> Optional[float]:
        """Seconds since the epoch at activation; None when inactive."""
        return epoch_seconds(self.activated)

    @classmethod
    def from_json(cls, value: Any) -> "Device":
        obj = as_object(value, cls.classifier)
        return cls(
            path=opt_str(obj, "path"),
            activated=opt_time(obj, "activated"),
            flags=opt_int(obj, "flags"),
            driver=opt_str(obj, "driver"),
            subtype=opt_str(obj, "subtype"),
            bps=opt_int(obj, "bps"),
            parity=opt_str(obj, "parity"),
            stopbits=opt_int(obj, "stopbits"),
            native=opt_int(obj, "native"),
            cycle=opt_float(obj, "cycle"),
            mincycle=opt_float(obj, "mincycle"),
        )


@dataclass(frozen=True)
class Devices(GpsdEvent):
    classifier: ClassVar[str] = "DEVICES"

    devices: List[Device]
    remote: Optional[str] = None

    @classmethod
    def from_json(cls, value: Any) -> "Devices":
        obj = as_object(value, cls.classifier)
        return cls(
            devices=req_list(obj, "devices", Device.from_json),
            remote=opt_str(obj, "remote"),
        )


@dataclass(frozen=True)
class Watch(GpsdEvent):
    """
    The subscriber's current policy, shipped in response to ?WATCH.

    ``raw`` is 1 for hex-dumped raw data, 2 for verbatim binary; ``timing``
    is undocumented upstream and reported for developer use only.
    """

    classifier: ClassVar[str] = "WATCH"

    enable: Optional[bool] = None
    json: Optional[bool] = None
    nmea: Optional[bool] = None
    raw: Optional[int] = None
    scaled: Optional[bool] = None
    split24: Optional[bool] = None
    pps: Optional[bool] = None
    device: Optional[str] = None
    remote: Optional[str] = None
    timing: Optional[bool] = None

    @classmethod
    def from_json(cls, value: Any) -> "Watch":
        obj = as_object(value, cls.classifier)
        return cls(
            enable=opt_bool(obj, "enable"),
            json=opt_bool(obj, "json"),
            nmea=opt_bool(obj, "nmea"),
            raw=opt_int(obj, "raw"),
            scaled=opt_bool(obj, "scaled"),
            split24=opt_bool(obj, "split24"),
            pps=opt_bool(obj, "pps"),
            device=opt_str(obj, "device"),
            remote=opt_str(obj, "remote"),
            timing=opt_bool(obj, "timing"),
        )


@dataclass(frozen=True)
class ErrorReport(GpsdEvent):
    """Shipped in response to a syntactically invalid command line or unknown command."""

    classifier: ClassVar[str] = "ERROR"

    message: str

    @classmethod
    def from_json(cls, value: Any) -> "ErrorReport":
        obj = as_object(value, cls.classifier)
        return cls(message=req_str(obj, "message"))


# ---------------------------------------------------------------------------
# Fix reports
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TPV(GpsdEvent):
    """
    Time-position-velocity report.

    ``mode`` is always present. Position members are present from a 2D fix
    on, altitude and vertical error from a 3D fix on. All ``ep*`` members are
    95% confidence error estimates.
    """

    classifier: ClassVar[str] = "TPV"

    mode: FixMode
    tag: Optional[str] = None
    device: Optional[str] = None
    time: Optional[datetime] = None
    ept: Optional[float] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    alt: Optional[float] = None
    epx: Optional[float] = None
    epy: Optional[float] = None
    epv: Optional[float] = None
    track: Optional[float] = None
    speed: Optional[float] = None
    climb: Optional[float] = None
    epd: Optional[float] = None
    eps: Optional[float] = None
    epc: Optional[float] = None

    @property
    def timestamp(self) -> Optional[float]:
        return epoch_seconds(self.time)

    @property
    def timestamp_error(self) -> Optional[float]:
        return self.ept

    @property
    def latitude(self) -> Optional[float]:
        return self.lat

    @property
    def longitude(self) -> Optional[float]:
        return self.lon

    @property
    def altitude(self) -> Optional[float]:
        return self.alt

    @property
    def longitude_error(self) -> Optional[float]:
        return self.epx

    @property
    def latitude_error(self) -> Optional[float]:
        return self.epy

    @property
    def altitude_error(self) -> Optional[float]:
        return self.epv

    @property
    def course(self) -> Optional[float]:
        return self.track

    @property
    def climb_rate(self) -> Optional[float]:
        return self.climb

    @property
    def course_error(self) -> Optional[float]:
        return self.epd

    @property
    def speed_error(self) -> Optional[float]:
        return self.eps

    @property
    def climb_rate_error(self) -> Optional[float]:
        return self.epc

    @classmethod
    def from_json(cls, value: Any) -> "TPV":
        obj = as_object(value, cls.classifier)
        raw_mode = req_int(obj, "mode")
        try:
            mode = FixMode(raw_mode)
        except ValueError:
            raise DecodeError(f"unknown fix mode {raw_mode}", details={"member": "mode"}) from None

        return cls(
            mode=mode,
            tag=opt_str(obj, "tag"),
            device=opt_str(obj, "device"),
            time=opt_time(obj, "time"),
            ept=opt_float(obj, "ept"),
            lat=opt_float(obj, "lat"),
            lon=opt_float(obj, "lon"),
            alt=opt_float(obj, "alt"),
            epx=opt_float(obj, "epx"),
            epy=opt_float(obj, "epy"),
            epv=opt_float(obj, "epv"),
            track=opt_float(obj, "track"),
            speed=opt_float(obj, "speed"),
            climb=opt_float(obj, "climb"),
            epd=opt_float(obj, "epd"),
            eps=opt_float(obj, "eps"),
            epc=opt_float(obj, "epc"),
        )


@dataclass(frozen=True)
class Satellite(GpsdObject):
    """
    One satellite of a SKY view. PRN 1-63 are GNSS, 64-96 GLONASS, 100-164 SBAS.

    ``used`` may be set for SBAS satellites when the solution has corrections
    from them.
    """

    PRN: int
    used: bool
    az: Optional[float] = None
    el: Optional[float] = None
    ss: Optional[float] = None

    @property
    def azimuth(self) -> Optional[float]:
        return self.az

    @property
    def elevation(self) -> Optional[float]:
        return self.el

    @property
    def signal_strength(self) -> Optional[float]:
        return self.ss

    @classmethod
    def from_json(cls, value: Any) -> "Satellite":
        obj = as_object(value, "satellite")
        return cls(
            PRN=req_int(obj, "PRN"),
            used=req_bool(obj, "used"),
            az=opt_float(obj, "az"),
            el=opt_float(obj, "el"),
            ss=opt_float(obj, "ss"),
        )


@dataclass(frozen=True)
class SKY(GpsdEvent):
    """
    Sky view of the satellite positions plus dilution of precision factors.

    Each DOP is dimensionless and multiplied by a base UERE gives an error
    estimate. DOPs may be missing when the covariance determinants are
    singular.
    """

    classifier: ClassVar[str] = "SKY"

    tag: Optional[str] = None
    device: Optional[str] = None
    time: Optional[datetime] = None
    xdop: Optional[float] = None
    ydop: Optional[float] = None
    vdop: Optional[float] = None
    tdop: Optional[float] = None
    hdop: Optional[float] = None
    pdop: Optional[float] = None
    gdop: Optional[float] = None
    satellites: List[Satellite] = field(default_factory=list)

    @property
    def timestamp(self) -> Optional[float]:
        return epoch_seconds(self.time)

    @property
    def longitude_dop(self) -> Optional[float]:
        return self.xdop

    @property
    def latitude_dop(self) -> Optional[float]:
        return self.ydop

    @property
    def altitude_dop(self) -> Optional[float]:
        return self.vdop

    @property
    def timestamp_dop(self) -> Optional[float]:
        return self.tdop

    @property
    def horizontal_dop(self) -> Optional[float]:
        return self.hdop

    @property
    def spherical_dop(self) -> Optional[float]:
        return self.pdop

    @property
    def hyperspherical_dop(self) -> Optional[float]:
        return self.gdop

    @classmethod
    def from_json(cls, value: Any) -> "SKY":
        obj = as_object(value, cls.classifier)
        return cls(
            tag=opt_str(obj, "tag"),
            device=opt_str(obj, "device"),
            time=opt_time(obj, "time"),
            xdop=opt_float(obj, "xdop"),
            ydop=opt_float(obj, "ydop"),
            vdop=opt_float(obj, "vdop"),
            tdop=opt_float(obj, "tdop"),
            hdop=opt_float(obj, "hdop"),
            pdop=opt_float(obj, "pdop"),
            gdop=opt_float(obj, "gdop"),
            satellites=opt_list(obj, "satellites", Satellite.from_json),
        )


@dataclass(frozen=True)
class GST(GpsdEvent):
    """
    Pseudorange noise report. Standard deviations are in meters, ``orient``
    in degrees from true north.
    """

    classifier: ClassVar[str] = "GST"

    tag: Optional[str] = None
    device: Optional[str] = None
    time: Optional[datetime] = None
    rms: Optional[float] = None
    major: Optional[float] = None
    minor: Optional[float] = None
    orient: Optional[float] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    alt: Optional[float] = None

    @property
    def timestamp(self) -> Optional[float]:
        return epoch_seconds(self.time)

    @classmethod
    def from_json(cls, value: Any) -> "GST":
        obj = as_object(value, cls.classifier)
        return cls(
            tag=opt_str(obj, "tag"),
            device=opt_str(obj, "device"),
            time=opt_time(obj, "time"),
            rms=opt_float(obj, "rms"),
            major=opt_float(obj, "major"),
            minor=opt_float(obj, "minor"),
            orient=opt_float(obj, "orient"),
            lat=opt_float(obj, "lat"),
            lon=opt_float(obj, "lon"),
            alt=opt_float(obj, "alt"),
        )


@dataclass(frozen=True)
class Poll(GpsdEvent):
    """
    Response to ?POLL: cached fixes and sky views of all active devices.
    A device that has not seen fixes is reported with mode NOT_SEEN.
    """

    classifier: ClassVar[str] = "POLL"

    time: datetime
    active: int
    tpv: List[TPV]
    gst: List[GST]
    sky: List[SKY]

    @property
    def timestamp(self) -> float:
        return self.time.timestamp()

    @property
    def fixes(self) -> List[TPV]:
        return self.tpv

    @property
    def skyviews(self) -> List[SKY]:
        return self.sky

    @classmethod
    def from_json(cls, value: Any) -> "Poll":
        obj = as_object(value, cls.classifier)
        return cls(
            time=req_time(obj, "time"),
            active=req_int(obj, "active"),
            tpv=req_list(obj, "tpv", TPV.from_json),
            gst=req_list(obj, "gst", GST.from_json),
            sky=req_list(obj, "sky", SKY.from_json),
        )


@dataclass(frozen=True)
class ATT(GpsdEvent):
    """
    Vehicle attitude from digital compass and gyroscope sensors. Angles in
    degrees; ``dip`` is positive when the field points into the Earth.
    Status codes (``*_st``) vary by device.
    """

    classifier: ClassVar[str] = "ATT"

    device: str
    time: datetime
    tag: Optional[str] = None
    heading: Optional[float] = None
    mag_st: Optional[str] = None
    pitch: Optional[float] = None
    pitch_st: Optional[str] = None
    yaw: Optional[float] = None
    yaw_st: Optional[str] = None
    roll: Optional[float] = None
    roll_st: Optional[str] = None
    dip: Optional[float] = None
    mag_len: Optional[float] = None
    mag_x: Optional[float] = None
    mag_y: Optional[float] = None
    mag_z: Optional[float] = None
    acc_len: Optional[float] = None
    acc_x: Optional[float] = None
    acc_y: Optional[float] = None
    acc_z: Optional[float] = None
    gyro_x: Optional[float] = None
    gyro_y: Optional[float] = None
    depth: Optional[float] = None
    temperature: Optional[float] = None

    _FLOATS: ClassVar[tuple] = (
        "heading", "pitch", "yaw", "roll", "dip",
        "mag_len", "mag_x", "mag_y", "mag_z",
        "acc_len", "acc_x", "acc_y", "acc_z",
        "gyro_x", "gyro_y", "depth", "temperature",
    )
    _STATES: ClassVar[tuple] = ("mag_st", "pitch_st", "yaw_st", "roll_st")

    @property
    def timestamp(self) -> float:
        return self.time.timestamp()

    @property
    def mag_state(self) -> Optional[str]:
        return self.mag_st

    @property
    def pitch_state(self) -> Optional[str]:
        return self.pitch_st

    @property
    def yaw_state(self) -> Optional[str]:
        return self.yaw_st

    @property
    def roll_state(self) -> Optional[str]:
        return self.roll_st

    @classmethod
    def from_json(cls, value: Any) -> "ATT":
        obj = as_object(value, cls.classifier)
        kwargs: dict = {name: opt_float(obj, name) for name in cls._FLOATS}
        kwargs.update({name: opt_str(obj, name) for name in cls._STATES})
        return cls(
            device=req_str(obj, "device"),
            time=req_time(obj, "time"),
            tag=opt_str(obj, "tag"),
            **kwargs,
        )


# ---------------------------------------------------------------------------
# Timing reports
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TOFF(GpsdEvent):
    """
    Offset between GPS time (from the serial data stream) and the system
    clock at the start of each reporting cycle.

    ``real_*`` is what the GPS thinks the time was at the start of the cycle,
    ``clock_*`` what the system clock read on receipt of its first message.
    """

    classifier: ClassVar[str] = "TOFF"

    device: str
    real_sec: int
    real_nsec: int
    clock_sec: int
    clock_nsec: int
    tag: Optional[str] = None

    @property
    def real_time(self) -> float:
        return self.real_sec + self.real_nsec / 1e9

    @property
    def clock_time(self) -> float:
        return self.clock_sec + self.clock_nsec / 1e9

    @property
    def offset(self) -> float:
        """GPS time minus system clock time, in seconds."""
        return (self.real_sec - self.clock_sec) + (self.real_nsec - self.clock_nsec) / 1e9

    @classmethod
    def from_json(cls, value: Any) -> "TOFF":
        obj = as_object(value, cls.classifier)
        return cls(
            device=req_str(obj, "device"),
            real_sec=req_int(obj, "real_sec"),
            real_nsec=req_int(obj, "real_nsec"),
            clock_sec=req_int(obj, "clock_sec"),
            clock_nsec=req_int(obj, "clock_nsec"),
            tag=opt_str(obj, "tag"),
        )


@dataclass(frozen=True)
class PPS(GpsdEvent):
    """
    Shipped each time the daemon sees a valid pulse-per-second strobe.

    Mirrors TOFF, except that the GPS time comes from the PPS edge and the
    NTP-style ``precision`` estimate is included.
    """

    classifier: ClassVar[str] = "PPS"

    device: str
    real_sec: int
    real_nsec: int
    clock_sec: int
    clock_nsec: int
    precision: Optional[int] = None
    tag: Optional[str] = None

    @property
    def real_time(self) -> float:
        return self.real_sec + self.real_nsec / 1e9

    @property
    def clock_time(self) -> float:
        return self.clock_sec + self.clock_nsec / 1e9

    @classmethod
    def from_json(cls, value: Any) -> "PPS":
        obj = as_object(value, cls.classifier)
        return cls(
            device=req_str(obj, "device"),
            real_sec=req_int(obj, "real_sec"),
            real_nsec=req_int(obj, "real_nsec"),
            clock_sec=req_int(obj, "clock_sec"),
            clock_nsec=req_int(obj, "clock_nsec"),
            precision=opt_int(obj, "precision"),
            tag=opt_str(obj, "tag"),
        )


BUILTIN_EVENTS = (
    Version, Devices, Device, Watch, Poll, ErrorReport,
    TPV, SKY, GST, ATT, TOFF, PPS,
)
