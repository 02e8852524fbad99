"""
Configuration for the InfoNode sync.

Defines the Config class with the dRofus field names, the Revit family and
parameter names, and the reconciliation tolerance.
"""

# Fixed dRofus occurrence fields (not user-tunable)
FIELD_SUB_OCC_ID = "id"
FIELD_SUB_ITEM_NUMBER = "article_id_number"
FIELD_SUB_ITEM_NAME = "article_id_name"
FIELD_HOST_OCC_ID = "parent_occurrence_id_id"
FIELD_HOST_ITEM_NAME = "parent_occurrence_id_article_id_name"
FIELD_HOST_OCC_TAG = "parent_occurrence_id_classification_number"
FIELD_IS_SUB_OCCURRENCE = "is_sub_occurrence"

# Marker parameter keys, in write order
MARKER_PARAM_KEYS = (
    "param_host_id",
    "param_host_name",
    "param_host_data",
    "param_host_data2",
    "param_host_tag",
    "param_modname",
    "param_subs",
)


class Config:
    """Configuration for the InfoNode sync.

    Attributes:
        field_host_model_name (str): dRofus field holding the host occurrence's model name
        field_host_item_data1 (str): dRofus field copied into InfoNode_hostdata
        field_host_item_data2 (str): dRofus field copied into InfoNode_hostdata2
        family_name (str): Marker family (and type) name (default: "InfoNode")
        marker_category (str): BuiltInCategory name markers live in
        link_model_name_param (str): Project-info parameter naming a linked model in dRofus
        occurrence_id_param (str): Instance parameter holding the dRofus occurrence id in links
        apply_link_transform (bool): Map linked positions into host coordinates (default: True)
        param_* (str): Marker parameter names
        position_tolerance_ft (float): Distance under which a marker is not moved (default: 0.01)
        missing_value (str): Placeholder written for absent data (default: "Ingen data")
        family_path (str): Optional .rfa to load when the family is missing
        shared_param_path (str): Optional shared parameter file to bind missing parameters from
        auto_import_requirements (bool): Load family / bind parameters when missing (default: True)
        drofus_server / drofus_database / drofus_project: Optional connection overrides
        request_timeout_s (float): HTTP timeout per request (default: 60)
        max_retries (int): Attempts for transient HTTP failures (default: 3)
        csv_log_path (str): Optional CSV file receiving one row per run

    Commentary:
        ✔ Field names for host data 1/2 and model name vary per dRofus database
        ✔ Tolerance is in Revit internal units (feet)
        ⚠ Changing param names requires the family to carry the same names

    Example:
        >>> cfg = Config()
        >>> cfg.position_tolerance_ft
        0.01
        >>> cfg.param_host_id
        'InfoNode_hostID'
    """

    def __init__(
        self,
        field_host_model_name="parent_occurrence_id_occurrence_data_17_11_11_10",
        field_host_item_data1="parent_occurrence_id_article_id_dyn_article_13101110",
        field_host_item_data2="parent_occurrence_id_article_id_dyn_article_13101211",
        family_name="InfoNode",
        marker_category="OST_SpecialityEquipment",
        link_model_name_param="model_name_drofus",
        occurrence_id_param="drofus_occurrence_id",
        apply_link_transform=True,
        param_host_id="InfoNode_hostID",
        param_host_name="InfoNode_hostname",
        param_host_data="InfoNode_hostdata",
        param_host_data2="InfoNode_hostdata2",
        param_host_tag="InfoNode_hosttag",
        param_modname="InfoNode_modname",
        param_subs="InfoNode_subs",
        position_tolerance_ft=0.01,
        missing_value="Ingen data",
        family_path=None,
        shared_param_path=None,
        auto_import_requirements=True,
        drofus_server=None,
        drofus_database=None,
        drofus_project=None,
        request_timeout_s=60.0,
        max_retries=3,
        csv_log_path=None,
    ):
        self.field_host_model_name = _require_name("field_host_model_name", field_host_model_name)
        self.field_host_item_data1 = _require_name("field_host_item_data1", field_host_item_data1)
        self.field_host_item_data2 = _require_name("field_host_item_data2", field_host_item_data2)

        self.family_name = _require_name("family_name", family_name)
        self.marker_category = _require_name("marker_category", marker_category)
        self.link_model_name_param = _require_name("link_model_name_param", link_model_name_param)
        self.occurrence_id_param = _require_name("occurrence_id_param", occurrence_id_param)
        self.apply_link_transform = bool(apply_link_transform)

        self.param_host_id = _require_name("param_host_id", param_host_id)
        self.param_host_name = _require_name("param_host_name", param_host_name)
        self.param_host_data = _require_name("param_host_data", param_host_data)
        self.param_host_data2 = _require_name("param_host_data2", param_host_data2)
        self.param_host_tag = _require_name("param_host_tag", param_host_tag)
        self.param_modname = _require_name("param_modname", param_modname)
        self.param_subs = _require_name("param_subs", param_subs)

        self.position_tolerance_ft = float(position_tolerance_ft)
        if self.position_tolerance_ft <= 0.0:
            raise ValueError("position_tolerance_ft must be > 0 (got {0})".format(position_tolerance_ft))
        self.missing_value = str(missing_value)

        self.family_path = family_path
        self.shared_param_path = shared_param_path
        self.auto_import_requirements = bool(auto_import_requirements)

        self.drofus_server = drofus_server
        self.drofus_database = drofus_database
        self.drofus_project = drofus_project

        self.request_timeout_s = float(request_timeout_s)
        self.max_retries = int(max_retries)
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1 (got {0})".format(max_retries))

        self.csv_log_path = csv_log_path

    @property
    def marker_param_names(self):
        """All marker parameter names, in write order."""
        return [getattr(self, k) for k in MARKER_PARAM_KEYS]

    @property
    def occurrence_fields(self):
        """Fields selected from dRofus for every sub-occurrence."""
        return [
            FIELD_SUB_OCC_ID,
            FIELD_SUB_ITEM_NUMBER,
            FIELD_SUB_ITEM_NAME,
            FIELD_HOST_OCC_ID,
            self.field_host_model_name,
            FIELD_HOST_ITEM_NAME,
            self.field_host_item_data1,
            self.field_host_item_data2,
            FIELD_HOST_OCC_TAG,
        ]

    def to_dict(self):
        """Serialize config to dict (for CSV/JSON run metadata)."""
        return dict(vars(self))

    @classmethod
    def from_dict(cls, d):
        """Build a Config from a plain dict (e.g. a Dynamo input node).

        Unknown keys raise ValueError so typos surface instead of being ignored.
        """
        if d is None:
            return cls()
        known = set(vars(cls()).keys())
        unknown = sorted(k for k in d if k not in known)
        if unknown:
            raise ValueError("Unknown config keys: {0}".format(", ".join(unknown)))
        return cls(**d)

    def __repr__(self):
        return (
            "Config(family={0!r}, tolerance_ft={1}, model_name_field={2!r})".format(
                self.family_name, self.position_tolerance_ft, self.field_host_model_name
            )
        )


def _require_name(key, value):
    if value is None or not str(value).strip():
        raise ValueError("{0} must be a non-empty string".format(key))
    return str(value)
