"""
Revit API bindings used by the InfoNode sync.

Must be importable under pytest (outside Revit): every name resolves to None
when Autodesk.Revit.DB is unavailable. Other modules reference these through
the module (api.FilteredElementCollector) so tests can patch one place.
"""

# Optional Revit API bindings (allow pytest outside Revit)
try:
    from Autodesk.Revit.DB import (
        BuiltInCategory,
        CategorySet,
        ElementTransformUtils,
        Family,
        FamilyInstance,
        FamilySymbol,
        FilteredElementCollector,
        RevitLinkInstance,
        Transaction,
        TransactionStatus,
        XYZ,
    )
    from Autodesk.Revit.DB.Structure import StructuralType
except Exception:
    BuiltInCategory = None
    CategorySet = None
    ElementTransformUtils = None
    Family = None
    FamilyInstance = None
    FamilySymbol = None
    FilteredElementCollector = None
    RevitLinkInstance = None
    Transaction = None
    TransactionStatus = None
    XYZ = None
    StructuralType = None


def require_api():
    if FilteredElementCollector is None:
        raise RuntimeError("Revit API unavailable (not running inside Revit/Dynamo)")


def collect(doc, cls, category=None, instances_only=False):
    """FilteredElementCollector(doc).OfClass(cls) [.OfCategory] [.WhereElementIsNotElementType] as a list."""
    require_api()
    fec = FilteredElementCollector(doc).OfClass(cls)
    if category is not None:
        fec = fec.OfCategory(getattr(BuiltInCategory, category))
    if instances_only:
        fec = fec.WhereElementIsNotElementType()
    return list(fec.ToElements())


def id_value(element_id):
    """Integer value of an ElementId (Value on 2024+, IntegerValue before)."""
    if element_id is None:
        return None
    for attr in ("Value", "IntegerValue"):
        v = getattr(element_id, attr, None)
        if v is not None:
            return int(v)
    return None


def storage_type_name(param):
    """"Integer" / "String" / "Double" / "ElementId" / "None" for a Parameter."""
    st = getattr(param, "StorageType", None)
    return str(st).split(".")[-1] if st is not None else "None"


def to_xyz(p):
    return XYZ(float(p[0]), float(p[1]), float(p[2]))


def point_of(element):
    """Point of a LocationPoint element; None for curve-based / unplaced elements."""
    loc = getattr(element, "Location", None)
    if loc is None:
        return None
    return getattr(loc, "Point", None)


def family_name_of(instance):
    symbol = getattr(instance, "Symbol", None)
    family = getattr(symbol, "Family", None) if symbol is not None else None
    return getattr(family, "Name", None) if family is not None else None


def transaction_started(tx):
    """True while tx is open (safe to roll back)."""
    try:
        status = tx.GetStatus()
    except Exception:
        return False
    if TransactionStatus is not None:
        return status == TransactionStatus.Started
    return str(status).split(".")[-1] == "Started"
