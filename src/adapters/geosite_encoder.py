"""GeoSite database encoder.

The output is a `v2ray.core.app.router.routercommon.GeoSiteList` protobuf
message, the `geosite.dat` format read by v2ray/v2fly/xray routers. The
message classes are built at import time from a descriptor so no generated
`_pb2` module has to be shipped.

Schema subset:

    message Domain {
      enum Type { Plain = 0; Regex = 1; RootDomain = 2; Full = 3; }
      Type type = 1;
      string value = 2;
      repeated Attribute attribute = 3;
    }
    message GeoSite { string country_code = 1; repeated Domain domain = 2; }
    message GeoSiteList { repeated GeoSite entry = 1; }
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError, EncodeError as ProtobufEncodeError

from core.domain.domain_type import DomainType
from core.domain.models import AggregatedDatabase
from core.errors import EncodeError, WriteError

log = logging.getLogger(__name__)

PROTO_PACKAGE = "v2ray.core.app.router.routercommon"

_Field = descriptor_pb2.FieldDescriptorProto


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto(
        name="app/router/routercommon/common.proto",
        package=PROTO_PACKAGE,
        syntax="proto3",
    )

    domain = fdp.message_type.add(name="Domain")
    domain_type = domain.enum_type.add(name="Type")
    for name, number in (("Plain", 0), ("Regex", 1), ("RootDomain", 2), ("Full", 3)):
        domain_type.value.add(name=name, number=number)

    attribute = domain.nested_type.add(name="Attribute")
    attribute.oneof_decl.add(name="typed_value")
    attribute.field.add(name="key", number=1, type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL)
    attribute.field.add(
        name="bool_value", number=2, type=_Field.TYPE_BOOL, label=_Field.LABEL_OPTIONAL, oneof_index=0
    )
    attribute.field.add(
        name="int_value", number=3, type=_Field.TYPE_INT64, label=_Field.LABEL_OPTIONAL, oneof_index=0
    )

    domain.field.add(
        name="type",
        number=1,
        type=_Field.TYPE_ENUM,
        type_name=f".{PROTO_PACKAGE}.Domain.Type",
        label=_Field.LABEL_OPTIONAL,
    )
    domain.field.add(name="value", number=2, type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL)
    domain.field.add(
        name="attribute",
        number=3,
        type=_Field.TYPE_MESSAGE,
        type_name=f".{PROTO_PACKAGE}.Domain.Attribute",
        label=_Field.LABEL_REPEATED,
    )

    geosite = fdp.message_type.add(name="GeoSite")
    geosite.field.add(name="country_code", number=1, type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL)
    geosite.field.add(
        name="domain",
        number=2,
        type=_Field.TYPE_MESSAGE,
        type_name=f".{PROTO_PACKAGE}.Domain",
        label=_Field.LABEL_REPEATED,
    )

    geosite_list = fdp.message_type.add(name="GeoSiteList")
    geosite_list.field.add(
        name="entry",
        number=1,
        type=_Field.TYPE_MESSAGE,
        type_name=f".{PROTO_PACKAGE}.GeoSite",
        label=_Field.LABEL_REPEATED,
    )
    return fdp


# Private pool: an installed v2ray `_pb2` module may already own these names
# in the default pool.
_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file_descriptor().SerializeToString())

GeoSiteList = message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{PROTO_PACKAGE}.GeoSiteList"))
GeoSite = message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{PROTO_PACKAGE}.GeoSite"))
Domain = message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{PROTO_PACKAGE}.Domain"))


def encode(db: AggregatedDatabase, *, domain_type: DomainType = DomainType.FULL) -> bytes:
    """Serialize `db` with labels in lexicographic order.

    Raises `EncodeError` if protobuf rejects a value.
    """

    try:
        site_list = GeoSiteList()
        for label in db.labels():
            site = site_list.entry.add(country_code=label)
            for value in db.groups[label]:
                site.domain.add(type=domain_type.wire_value, value=value)
        return site_list.SerializeToString(deterministic=True)
    except (ProtobufEncodeError, ValueError, TypeError) as exc:
        raise EncodeError(f"failed to serialize GeoSiteList: {exc}") from exc


def decode_entries(data: bytes) -> list[tuple[str, list[tuple[DomainType, str]]]]:
    """Parse a GeoSiteList into `(label, [(rule kind, value), ...])` in file order."""

    site_list = GeoSiteList()
    try:
        site_list.ParseFromString(data)
        return [
            (site.country_code, [(DomainType.from_wire(d.type), d.value) for d in site.domain])
            for site in site_list.entry
        ]
    except (DecodeError, KeyError) as exc:
        raise EncodeError(f"not a GeoSiteList: {exc}") from exc


def decode(data: bytes) -> AggregatedDatabase:
    """Parse a GeoSiteList back into an `AggregatedDatabase` (rule kinds dropped)."""

    return AggregatedDatabase(
        groups={label: [value for _, value in entries] for label, entries in decode_entries(data)}
    )


def write(data: bytes, path: Path) -> Path:
    """Write `data` to `path` atomically (temp file + rename in the same directory).

    Raises `WriteError`; on failure `path` is left untouched.
    """

    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise WriteError(f"failed to write GeoSite file {path}: {exc}") from exc

    log.debug("wrote %d bytes to %s", len(data), path)
    return path
