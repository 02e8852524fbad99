"""
Project requirements for the InfoNode sync.

Before any marker is touched the host document must have:
1. the marker family loaded
2. every marker parameter bound to the marker category
3. every link referenced by an existing marker loaded

Missing family / parameters are imported from cfg.family_path /
cfg.shared_param_path when cfg.auto_import_requirements is set.
"""

import os

from . import api
from .links import get_link_model_names
from .markers import collect_markers
from ..errors import RequirementError

# Temporary probe instance sits well above any real model content
PROBE_POINT = (0.0, 0.0, 1000.0)


def _log(level, msg):
    print("[{0}] infonode.requirements: {1}".format(level, msg))


def paths_exist(cfg):
    """True when both the family file and the shared parameter file are reachable."""
    return bool(
        cfg.family_path and os.path.isfile(cfg.family_path)
        and cfg.shared_param_path and os.path.isfile(cfg.shared_param_path)
    )


def find_family(doc, cfg):
    for fam in api.collect(doc, api.Family):
        if getattr(fam, "Name", None) == cfg.family_name:
            return fam
    return None


def family_exists(doc, cfg):
    return find_family(doc, cfg) is not None


def load_family(doc, cfg):
    """Load the marker family from cfg.family_path.

    Returns:
        (ok, error) where error is None on success
    """
    path = cfg.family_path
    if not path or not os.path.isfile(path):
        return False, "{0} family file not found at {1}".format(cfg.family_name, path)

    tx = api.Transaction(doc, "Load {0} family".format(cfg.family_name))
    tx.Start()
    try:
        if doc.LoadFamily(path):
            tx.Commit()
            _log("INFO", "Loaded family from {0}".format(path))
            return True, None
        tx.RollBack()
        return False, "Revit returned false while loading the {0} family.".format(cfg.family_name)
    except Exception as e:
        if api.transaction_started(tx):
            tx.RollBack()
        return False, "Exception while loading {0} family: {1}".format(cfg.family_name, e)


def import_parameters(doc, cfg, diag=None):
    """Bind every shared parameter from cfg.shared_param_path not yet bound.

    Must run inside an open transaction. The application's shared parameter
    file is restored afterwards.

    Returns:
        number of definitions bound (0 when the file is missing or binding failed)
    """
    path = cfg.shared_param_path
    if not path or not os.path.isfile(path):
        return 0

    app = doc.Application
    if app is None:
        return 0

    previous = app.SharedParametersFilename
    bound = 0
    try:
        app.SharedParametersFilename = path
        def_file = app.OpenSharedParameterFile()
        if def_file is None:
            return 0

        categories = api.CategorySet()
        categories.Insert(doc.Settings.Categories.get_Item(getattr(api.BuiltInCategory, cfg.marker_category)))

        for group in def_file.Groups:
            for definition in group.Definitions:
                if doc.ParameterBindings.Contains(definition):
                    continue
                binding = app.Create.NewInstanceBinding(categories)
                doc.ParameterBindings.Insert(definition, binding)
                bound += 1
    except Exception as e:
        # check_parameters re-reads the probe, so a partial import is reported there
        _log("WARN", "Shared parameter import failed: {0}".format(e))
        if diag is not None:
            diag.error("requirements", "import_parameters", "Shared parameter import failed", exc=e)
    finally:
        if previous:
            app.SharedParametersFilename = previous

    _log("INFO", "Bound {0} shared parameters".format(bound))
    return bound


def _missing_on(instance, names):
    return [n for n in names if instance.LookupParameter(n) is None]


def check_parameters(doc, cfg, diag=None):
    """List marker parameters missing from the project.

    Places a temporary marker, reads its parameters, optionally imports the
    shared parameters once, then deletes the probe.

    Returns:
        list of missing parameter names (empty when complete)

    Raises:
        RequirementError if the family / a type is missing or the probe fails
    """
    family = find_family(doc, cfg)
    if family is None:
        raise RequirementError("{0} family not found".format(cfg.family_name))

    symbol = None
    for sid in family.GetFamilySymbolIds():
        symbol = doc.GetElement(sid)
        if symbol is not None:
            break
    if symbol is None:
        raise RequirementError("No family symbol found in {0} family".format(cfg.family_name))

    names = cfg.marker_param_names
    tx = api.Transaction(doc, "Check {0} parameters".format(cfg.family_name))
    tx.Start()
    try:
        if not symbol.IsActive:
            symbol.Activate()
        probe = doc.Create.NewFamilyInstance(
            api.to_xyz(PROBE_POINT), symbol, api.StructuralType.NonStructural
        )

        missing = _missing_on(probe, names)
        if missing and cfg.auto_import_requirements:
            import_parameters(doc, cfg, diag)
            missing = _missing_on(probe, names)

        doc.Delete(probe.Id)
        tx.Commit()
    except Exception as e:
        if api.transaction_started(tx):
            tx.RollBack()
        raise RequirementError("Error checking parameters: {0}".format(e)) from e

    return missing


def check_models(doc, cfg, diag=None):
    """First model name referenced by a marker whose link is not loaded, or None.

    Markers holding the missing-data placeholder are ignored.
    """
    loaded = set(get_link_model_names(doc, cfg, diag))
    markers, _ = collect_markers(doc, cfg, diag)
    for m in markers:
        name = m.modname
        if name is None or not name.strip() or name == cfg.missing_value:
            continue
        if name not in loaded:
            return name
    return None


def ensure_requirements(doc, cfg, diag=None):
    """Run every check; raise RequirementError with a user-facing message on the first failure."""
    if not family_exists(doc, cfg):
        error = None
        if cfg.auto_import_requirements and cfg.family_path:
            ok, error = load_family(doc, cfg)
            if not ok:
                _log("WARN", error)
        if not family_exists(doc, cfg):
            msg = "Required {0} family does not exist in the model!".format(cfg.family_name)
            if error:
                msg = "{0}\n{1}".format(msg, error)
            raise RequirementError(msg)

    missing = check_parameters(doc, cfg, diag)
    if missing:
        raise RequirementError(
            "One or more required parameters missing from the project:\n{0}".format(", ".join(missing))
        )

    unloaded = check_models(doc, cfg, diag)
    if unloaded:
        raise RequirementError("One or more relevant links not loaded:\n{0}".format(unloaded))
