from marshmallow import fields
from kdm.types.base import BaseSchema, EXCLUDE
from kdm.types.models import K8sVersionInfo, CatalogSnapshot


def _system_images_field(data_key: str) -> fields.Dict:
    return fields.Dict(
        keys=fields.Str(),
        values=fields.Dict(
            keys=fields.Str(), values=fields.Str(allow_none=True), allow_none=True
        ),
        data_key=data_key,
        load_default=dict,
    )


def _service_options_field(data_key: str) -> fields.Dict:
    return fields.Dict(
        keys=fields.Str(),
        values=fields.Dict(
            keys=fields.Str(),
            values=fields.Dict(
                keys=fields.Str(), values=fields.Str(allow_none=True), allow_none=True
            ),
            allow_none=True,
        ),
        data_key=data_key,
        load_default=dict,
    )


class K8sVersionInfoSchema(BaseSchema):
    __model__ = K8sVersionInfo

    min_rancher_version = fields.Str(
        data_key="minRancherVersion", allow_none=True, load_default=None
    )
    max_rancher_version = fields.Str(
        data_key="maxRancherVersion", allow_none=True, load_default=None
    )
    deprecate_rancher_version = fields.Str(
        data_key="deprecateRancherVersion", allow_none=True, load_default=None
    )


class CatalogSnapshotSchema(BaseSchema):
    __model__ = CatalogSnapshot

    class Meta:
        unknown = EXCLUDE
        ordered = True

    system_images = _system_images_field("K8sVersionRKESystemImages")
    service_options = _service_options_field("K8sVersionServiceOptions")
    version_info = fields.Dict(
        keys=fields.Str(),
        values=fields.Nested(K8sVersionInfoSchema()),
        data_key="K8sVersionInfo",
        load_default=dict,
    )
    default_k8s_versions = fields.Dict(
        keys=fields.Str(),
        values=fields.Str(allow_none=True),
        data_key="RancherDefaultK8sVersions",
        load_default=dict,
    )
    versioned_templates = fields.Dict(
        keys=fields.Str(),
        values=fields.Dict(keys=fields.Str(), values=fields.Str()),
        data_key="K8sVersionedTemplates",
        load_default=dict,
    )
    windows_system_images = _system_images_field("K8sVersionWindowsSystemImages")
    windows_service_options = _service_options_field("K8sVersionWindowsServiceOptions")
