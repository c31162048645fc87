"""Recording format — versioned tagged-block encoding of a recording.

Layout (order-significant)::

    <matchrecording>
      <version>1</version>
      <initT>..</initT>
      <endT>..</endT>
      <mapname>..</mapname>
      <allblobmeta> <blobmeta>..</blobmeta> ... </allblobmeta>
      <recording> <tick> <blobdata>..</blobdata> ... </tick> ... </recording>
      <savepoints> <savepoint><name/><tickindex/></savepoint> ... </savepoints>
    </matchrecording>

``<savepoints>`` is optional. Every recorded tick gets a ``<tick>``
block, including empty ones. The version is checked before anything
else is read; unknown versions are rejected.
"""

from __future__ import annotations

import logging

from matchrecorder.engine.recording import SessionRecording
from matchrecorder.models.entity_meta import EntityMeta
from matchrecorder.models.entity_sample import EntitySample
from matchrecorder.persistence.tagged_text import (
    RecordingFormatError,
    TagWriter,
    parse_tagged,
)
from matchrecorder.util.constants import FORMAT_VERSION, SUPPORTED_FORMAT_VERSIONS

log = logging.getLogger(__name__)

ROOT_TAG = "matchrecording"


class UnsupportedVersionError(RecordingFormatError):
    """The recording was written by an unknown format version."""

    def __init__(self, version: int) -> None:
        super().__init__(
            f"Unsupported recording format version {version} "
            f"(supported: {sorted(SUPPORTED_FORMAT_VERSIONS)})"
        )
        self.version = version


# ===================================================================
# Write
# ===================================================================

def serialize_recording(recording: SessionRecording) -> str:
    """Serialize a recording. Output is deterministic for equal input."""
    w = TagWriter()
    w.open(ROOT_TAG)
    w.value("version", FORMAT_VERSION)
    w.value("initT", recording.init_t)
    w.value("endT", recording.end_t)
    w.value("mapname", recording.map_name)

    w.open("allblobmeta")
    for netid in sorted(recording.metas):
        recording.metas[netid].write(w)
    w.close("allblobmeta")

    w.open("recording")
    for samples in recording.ticks:
        w.open("tick")
        for sample in samples:
            sample.write(w)
        w.close("tick")
    w.close("recording")

    if recording.save_points:
        w.open("savepoints")
        for name, tick in recording.save_points.items():
            w.open("savepoint")
            w.value("name", name)
            w.value("tickindex", tick)
            w.close("savepoint")
        w.close("savepoints")

    w.close(ROOT_TAG)
    return w.getvalue()


# ===================================================================
# Read
# ===================================================================

def parse_recording(text: str) -> SessionRecording:
    """Parse text written by :func:`serialize_recording`.

    Raises:
        UnsupportedVersionError: If the version is not supported.
        RecordingFormatError: If the text is malformed.
    """
    root = parse_tagged(text)
    if root.tag != ROOT_TAG:
        raise RecordingFormatError(f"Expected <{ROOT_TAG}>, found <{root.tag}>")

    c = root.cursor()
    version = c.int_value("version")
    if version not in SUPPORTED_FORMAT_VERSIONS:
        raise UnsupportedVersionError(version)

    recording = SessionRecording()
    recording.init_t = c.int_value("initT")
    recording.end_t = c.int_value("endT")
    recording.map_name = c.text("mapname")

    for block in c.take("allblobmeta").all("blobmeta"):
        meta = EntityMeta.read(block.cursor())
        if meta.netid in recording.metas:
            raise RecordingFormatError(f"Duplicate blobmeta for netid {meta.netid}")
        recording.metas[meta.netid] = meta

    for index, tick in enumerate(c.take("recording").all("tick")):
        samples = [EntitySample.read(b.cursor()) for b in tick.all("blobdata")]
        for sample in samples:
            if sample.netid not in recording.metas:
                log.warning("Tick %d: blobdata references unknown netid %d", index, sample.netid)
        recording.ticks.append(samples)

    save_points = c.take_optional("savepoints")
    if save_points is not None:
        for block in save_points.all("savepoint"):
            sc = block.cursor()
            name = sc.text("name")
            recording.save_points[name] = sc.int_value("tickindex")
            sc.finish()
    c.finish()

    log.debug("Parsed recording v%d: %d ticks, %d metas, map %r",
              version, recording.num_recorded_ticks, len(recording.metas), recording.map_name)
    return recording
