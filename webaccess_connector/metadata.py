"""
Metadata — Modules, objects and attributes from the Web Access metaschema.

The metaschema is queried like any other class through /query/list.rails:

  Metadata.Module         the installed modules
  Metadata.ClassType      the objects (classes) of every module
  Metadata.AttributeType  the attributes of every class

Each returned row has this shape:
    {
      "value": "<guid>",
      "name": "<title>",
      "attributes": {"Name": "...", "Module.Guid": "...", ...}
    }

Attribute resolution walks the inheritance chain: the attributes of a class
are queried together with Class.SuperClassType.Guid, and the query is repeated
for the super class until a class has none. The most-derived definition of a
name wins; the result is sorted by title.

Limitation: metadata queries request page_size=999 and are not paged. When the
service reports more than one page a warning is printed, since the extra rows
are not fetched.
"""

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

from .commands import QueryCommands
from .constants import METADATA_PAGE_SIZE
from .outcomes import RequestSuccess

Callback = Optional[Callable[[Any], None]]

MODULE_ATTRIBUTES = "Name,DatabasePrefix,IsClone,IsExternal"
CLASS_ATTRIBUTES = (
    "Name,Module.Guid,Module.Name,Module.Title,"
    "SuperClassType.Module.Name,SuperClassType.Name,Table.Name"
)
ATTRIBUTE_ATTRIBUTES = (
    "DataType,Name,RelatedClassType.Guid,IsName,PKeyNumber,Class.SuperClassType.Guid"
)


@dataclass
class MetadataModule:
    guid: str
    name: str
    title: str
    database_prefix: Optional[str] = None
    is_external: Optional[str] = None
    is_clone: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MetadataObject:
    guid: str
    name: str
    title: str
    module_guid: Optional[str] = None
    module_name: Optional[str] = None
    module_title: Optional[str] = None
    database_table: Optional[str] = None
    parent_class_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MetadataAttribute:
    guid: str
    name: str
    title: str
    type: Optional[str] = None
    related_class_guid: Optional[str] = None
    is_name: bool = False
    is_primary_key: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _sort_by_title(items):
    return sorted(items, key=lambda item: (item.title or "").lower())


def _rows(data) -> List[Dict[str, Any]]:
    if not isinstance(data, dict):
        return []
    return data.get("objects") or []


def _module_from_row(item) -> MetadataModule:
    attributes = item.get("attributes") or {}
    return MetadataModule(
        guid=item.get("value"),
        name=attributes.get("Name"),
        title=item.get("name"),
        database_prefix=attributes.get("DatabasePrefix"),
        is_external=attributes.get("IsExternal"),
        is_clone=attributes.get("IsClone"),
    )


def _object_from_row(item) -> MetadataObject:
    attributes = item.get("attributes") or {}
    obj = MetadataObject(
        guid=item.get("value"),
        name=attributes.get("Name"),
        title=item.get("name"),
        module_guid=attributes.get("Module.Guid"),
        module_name=attributes.get("Module.Name"),
        module_title=attributes.get("Module.Title"),
        database_table=attributes.get("Table.Name"),
    )
    if attributes.get("SuperClassType.Name"):
        obj.parent_class_name = (
            f"{attributes.get('SuperClassType.Module.Name')}.{attributes['SuperClassType.Name']}"
        )
    return obj


def _attribute_from_row(item) -> MetadataAttribute:
    attributes = item.get("attributes") or {}
    return MetadataAttribute(
        guid=item.get("value"),
        name=attributes.get("Name"),
        title=item.get("name"),
        type=attributes.get("DataType"),
        related_class_guid=attributes.get("RelatedClassType.Guid"),
        is_name=attributes.get("IsName") == "True",
        is_primary_key=attributes.get("PKeyNumber") == "1",
    )


class MetadataCommands:
    """Metadata operations built on QueryCommands.run_query().

    Attributes:
        debug: If True, print each traversal step.
    """

    def __init__(self, queries: QueryCommands, debug: bool = False):
        self._queries = queries
        self.debug = debug

    def get_modules(self, on_load: Callback = None, on_error: Callback = None):
        """List all modules, sorted by title. Data: {"modules": [MetadataModule]}."""
        query_data = {
            "class_name": "Metadata.Module",
            "attributes": MODULE_ATTRIBUTES,
            "page_size": METADATA_PAGE_SIZE,
        }
        outcome = self._queries.run_query(query_data)
        if not outcome.ok:
            return self._finish(outcome, on_load, on_error)

        self._warn_if_truncated(outcome.data, "Metadata.Module")
        modules = [_module_from_row(item) for item in _rows(outcome.data)]
        outcome.data = {"modules": _sort_by_title(modules)}
        return self._finish(outcome, on_load, on_error)

    def get_objects_for_module(self, module_guid: str, on_load: Callback = None,
                               on_error: Callback = None):
        """List the objects of a module. Data: {"objects": [MetadataObject]}."""
        query_data = {"cns": "Module.Guid-e-0", "c0": module_guid}
        return self._get_objects(query_data, False, on_load, on_error)

    def get_object(self, class_name: Optional[str] = None, object_guid: Optional[str] = None,
                   on_load: Callback = None, on_error: Callback = None):
        """Describe one object, by "Module.Class" name or by guid.

        Data is the MetadataObject, or None when nothing matched.
        """
        if class_name:
            module_name, _, object_name = class_name.partition(".")
            query_data = {
                "cns": "Module.Name-e-0_a_Name-e-1",
                "c0": module_name,
                "c1": object_name,
            }
        elif object_guid:
            query_data = {"cns": "Guid-e-0", "c0": object_guid}
        else:
            raise ValueError("get_object() needs class_name or object_guid")
        return self._get_objects(query_data, True, on_load, on_error)

    def get_attributes_for_object(self, object_guid: str, on_load: Callback = None,
                                  on_error: Callback = None):
        """Resolve every attribute of an object, including inherited ones.

        Queries Metadata.AttributeType for the object, then for each super
        class in turn, one level at a time. An attribute name already seen on
        a more derived class is skipped. A failure at any level is delivered
        as the overall outcome; no partial list is returned.

        Data: {"attributes": [MetadataAttribute]} sorted by title.
        """
        if not object_guid:
            raise ValueError("get_attributes_for_object() needs object_guid")
        attributes = []
        attribute_names = set()
        visited = set()
        logged_on = logged_off = False
        outcome = None
        class_guid = object_guid

        while class_guid and class_guid not in visited:
            visited.add(class_guid)
            if self.debug:
                print(f"  Fetching attributes for class {class_guid}")

            query_data = {
                "class_name": "Metadata.AttributeType",
                "attributes": ATTRIBUTE_ATTRIBUTES,
                "cns": "Class.Guid-e-0",
                "c0": class_guid,
                "page_size": METADATA_PAGE_SIZE,
            }
            outcome = self._queries.run_query(query_data)
            logged_on = logged_on or outcome.logged_on
            logged_off = logged_off or outcome.logged_off
            if not outcome.ok:
                outcome.logged_on, outcome.logged_off = logged_on, logged_off
                return self._finish(outcome, on_load, on_error)

            self._warn_if_truncated(outcome.data, f"Metadata.AttributeType ({class_guid})")

            parent_guid = ""
            for item in _rows(outcome.data):
                attribute = _attribute_from_row(item)
                if attribute.name not in attribute_names:
                    attributes.append(attribute)
                    attribute_names.add(attribute.name)
                # every row carries the same super class guid
                parent_guid = (item.get("attributes") or {}).get("Class.SuperClassType.Guid") or ""

            class_guid = parent_guid

        if class_guid and self.debug:
            print(f"  Inheritance cycle at class {class_guid}, stopping")

        result = RequestSuccess(
            data={"attributes": _sort_by_title(attributes)},
            response=outcome.response if outcome else None,
            status_code=outcome.status_code if outcome else 200,
            logged_on=logged_on,
            logged_off=logged_off,
        )
        return self._finish(result, on_load, on_error)

    def _get_objects(self, query_data, single, on_load, on_error):
        query_data["class_name"] = "Metadata.ClassType"
        query_data["attributes"] = CLASS_ATTRIBUTES
        query_data["page_size"] = METADATA_PAGE_SIZE

        outcome = self._queries.run_query(query_data)
        if not outcome.ok:
            return self._finish(outcome, on_load, on_error)

        self._warn_if_truncated(outcome.data, "Metadata.ClassType")
        objects = [_object_from_row(item) for item in _rows(outcome.data)]
        if single:
            outcome.data = objects[0] if objects else None
        else:
            outcome.data = {"objects": _sort_by_title(objects)}
        return self._finish(outcome, on_load, on_error)

    @staticmethod
    def _warn_if_truncated(data, label):
        if not isinstance(data, dict):
            return
        try:
            page_count = float(data.get("pageCount") or 0)
        except (TypeError, ValueError):
            return
        if page_count > 1:
            print(
                f"  WARNING: {label} returned {int(page_count)} pages; only the first "
                f"{METADATA_PAGE_SIZE} rows were read"
            )

    @staticmethod
    def _finish(outcome, on_load, on_error):
        if outcome.ok:
            if on_load:
                on_load(outcome)
        elif on_error:
            on_error(outcome)
        return outcome
