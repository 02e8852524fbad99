"""
Linked model support for the InfoNode sync.

Reads, for every loaded RVT link that carries a dRofus model name:
- the model name (project-info parameter, default "model_name_drofus")
- every family instance with a dRofus occurrence id and a point location

Positions are returned in host coordinates (link total transform applied)
unless cfg.apply_link_transform is False.
"""

from . import api
from .safe_api import safe_call
from ..core.records import LinkedInstance, as_point


def _log(level, msg):
    print("[{0}] infonode.links: {1}".format(level, msg))


def _param_string(element, name):
    """AsString() of a named parameter, stripped; None when absent / blank."""
    if element is None:
        return None
    p = element.LookupParameter(name)
    if p is None:
        return None
    s = p.AsString()
    if s is None or not s.strip():
        return None
    return s.strip()


def link_model_name(link_doc, cfg):
    """dRofus model name of a linked document, or None."""
    if link_doc is None:
        return None
    return _param_string(link_doc.ProjectInformation, cfg.link_model_name_param)


def iter_loaded_links(doc, cfg, diag=None):
    """Yield (link_instance, link_doc, model_name) for loaded links with a model name."""
    for link in api.collect(doc, api.RevitLinkInstance):
        label = getattr(link, "Name", None)
        link_doc = safe_call(
            diag, phase="links", callsite="GetLinkDocument",
            fn=link.GetLinkDocument, default=None, context={"link": label},
        )
        if link_doc is None:
            _log("DEBUG", "Skipping unloaded link {0!r}".format(label))
            continue
        name = safe_call(
            diag, phase="links", callsite="link_model_name",
            fn=lambda: link_model_name(link_doc, cfg), default=None, context={"link": label},
        )
        if name is None:
            _log("DEBUG", "Skipping link {0!r} without {1}".format(label, cfg.link_model_name_param))
            continue
        yield link, link_doc, name


def get_link_model_names(doc, cfg, diag=None):
    """Unique dRofus model names of loaded links, in collector order."""
    names = []
    for _link, _link_doc, name in iter_loaded_links(doc, cfg, diag):
        if name not in names:
            names.append(name)
    return names


def read_occurrence_id(element, cfg):
    """dRofus occurrence id stored on a linked instance, or None.

    Integer parameters are read directly; string parameters must parse as int.
    """
    p = element.LookupParameter(cfg.occurrence_id_param)
    if p is None or not p.HasValue:
        return None
    kind = api.storage_type_name(p)
    if kind == "Integer":
        return int(p.AsInteger())
    if kind == "String":
        s = p.AsString()
        if s is None:
            return None
        try:
            return int(s.strip())
        except ValueError:
            return None
    return None


def _link_transform(link, diag, label):
    def _get():
        return link.GetTotalTransform()
    return safe_call(
        diag, phase="links", callsite="GetTotalTransform",
        fn=_get, default=None, context={"link": label},
    )


def collect_instances_in_link(link_doc, cfg, transform=None, source_label=None, diag=None):
    """LinkedInstance for every placed family instance carrying an occurrence id."""
    found = []
    for elem in api.collect(link_doc, api.FamilyInstance, instances_only=True):
        elem_id = api.id_value(getattr(elem, "Id", None))
        occ_id = safe_call(
            diag, phase="links", callsite="read_occurrence_id",
            fn=lambda: read_occurrence_id(elem, cfg), default=None,
            context={"elem_id": elem_id, "link": source_label},
        )
        if occ_id is None:
            continue
        point = api.point_of(elem)
        if point is None:
            continue
        if transform is not None:
            point = transform.OfPoint(point)
        found.append(LinkedInstance(occ_id, as_point(point), source_label=source_label))
    return found


def collect_linked_instances(doc, cfg, diag=None):
    """Collect occurrence-carrying instances from every loaded, named link."""
    instances = []
    for link, link_doc, name in iter_loaded_links(doc, cfg, diag):
        label = getattr(link, "Name", None) or name
        transform = None
        if cfg.apply_link_transform:
            transform = _link_transform(link, diag, label)
        found = collect_instances_in_link(link_doc, cfg, transform=transform, source_label=label, diag=diag)
        _log("INFO", "Collected {0} occurrence instances from {1!r}".format(len(found), label))
        instances.extend(found)
    return instances
