##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
This module houses dataclasses that define the format of the data
that's stored in Brew Guide's database.

Records are persisted and exported as plain JSON objects using camelCase keys
(`animationType`, `hasValve`, ...). Each model maps those keys onto snake_case
attributes and keeps any key it does not know about in `additional_data`, so a
record written by a newer version of the app survives a load/save cycle intact.
"""

import copy
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import Field, dataclass, field
from dataclasses import fields as dataclass_fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar


LOG = logging.getLogger(__name__)
T = TypeVar("T", bound="BaseDataModel")


class AnimationType(str, Enum):
    """The base brewer animation a custom equipment reuses."""

    V60 = "v60"
    KALITA = "kalita"
    ORIGAMI = "origami"
    CLEVER = "clever"
    CUSTOM = "custom"


@dataclass
class BaseDataModel(ABC):
    """
    A base class for dataclasses that provides common serialization, deserialization, and
    update functionality, with support for additional data.

    Attributes:
        additional_data: A dictionary to store any extra data not explicitly defined
            as fields in the dataclass.
        fields_allowed_to_be_updated: A list of field names that are allowed to be updated.
            Must be defined in subclasses.

    Methods:
        to_dict:
            Convert the dataclass instance to its JSON-shaped dictionary.

        to_json:
            Serialize the dataclass instance to a JSON string.

        from_dict (classmethod):
            Create an instance of the dataclass from a JSON-shaped dictionary.

        from_json (classmethod):
            Create an instance of the dataclass from a JSON string.

        get_instance_fields:
            Retrieve the fields associated with this dataclass instance.

        get_class_fields (classmethod):
            Retrieve the fields associated with the dataclass class itself.

        update_fields:
            Update the fields of the dataclass based on a given dictionary of updates.

        copy:
            Return a deep copy of this instance.
    """

    additional_data: Dict = field(default_factory=dict)

    # Maps attribute names to the key used in the stored JSON
    json_aliases = {}

    @classmethod
    def _alias_for(cls, attr_name: str) -> str:
        return cls.json_aliases.get(attr_name, attr_name)

    @classmethod
    def _attr_for(cls, json_key: str) -> Optional[str]:
        for attr_name, alias in cls.json_aliases.items():
            if alias == json_key:
                return attr_name
        if json_key in {f.name for f in cls.get_class_fields()} and json_key != "additional_data":
            return json_key
        return None

    def to_dict(self) -> Dict:
        """
        Convert the dataclass to the dictionary shape it is stored and exported in.
        Attributes set to None are omitted.

        Returns:
            The dataclass as a JSON-shaped dictionary.
        """
        result = copy.deepcopy(self.additional_data)
        for field_obj in self.get_instance_fields():
            if field_obj.name == "additional_data":
                continue
            value = getattr(self, field_obj.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            result[self._alias_for(field_obj.name)] = copy.deepcopy(value)
        return result

    def to_json(self) -> str:
        """
        Serialize the dataclass to a JSON string.

        Returns:
            The dataclass as a JSON string.
        """
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls: Type[T], data: Dict) -> T:
        """
        Create an instance of the dataclass from a JSON-shaped dictionary.

        Args:
            data: A dictionary to turn into an instance of this dataclass.

        Returns:
            An instance of the dataclass that called this.
        """
        kwargs: Dict[str, Any] = {}
        extras: Dict[str, Any] = {}
        for key, value in data.items():
            attr_name = cls._attr_for(key)
            if attr_name is None:
                extras[key] = copy.deepcopy(value)
            else:
                kwargs[attr_name] = copy.deepcopy(value)
        return cls(additional_data=extras, **kwargs)

    @classmethod
    def from_json(cls: Type[T], json_str: str) -> T:
        """
        Create an instance of the dataclass from a JSON string.

        Args:
            json_str: A JSON string to turn into an instance of this dataclass.

        Returns:
            An instance of the dataclass that called this.
        """
        return cls.from_dict(json.loads(json_str))

    def get_instance_fields(self) -> Tuple[Field]:
        """
        Get the fields associated with this instance.

        Returns:
            A tuple of dataclass.Field objects representing the fields in this data class.
        """
        return dataclass_fields(self)

    @classmethod
    def get_class_fields(cls) -> Tuple[Field]:
        """
        Get the fields associated with this object.

        Returns:
            A tuple of dataclass.Field objects representing the fields in this data class.
        """
        return dataclass_fields(cls)

    @property
    @abstractmethod
    def fields_allowed_to_be_updated(self) -> List[str]:
        """
        A property to be overridden in subclasses to define which fields are allowed to be updated.

        Returns:
            A list of fields that are allowed to be updated in this class.
        """

    def update_fields(self, updates: Dict):
        """
        Given a dictionary of updates to be made to this data class, loop through the updates
        applying them when valid. Keys may be attribute names or their JSON aliases. The
        `id` is never updated.

        Args:
            updates: A dictionary of updates to be made to this data class.
        """
        field_names = {f.name for f in self.get_instance_fields()} - {"additional_data"}
        for key, new_value in updates.items():
            field_name = self._attr_for(key) or key
            if field_name == "id":
                continue

            if field_name in field_names:
                if getattr(self, field_name) == new_value:  # Not an update so skip
                    continue

                if field_name in self.fields_allowed_to_be_updated:
                    setattr(self, field_name, new_value)
                else:
                    LOG.warning(f"Field '{field_name}' is not allowed to be updated. Ignoring the change.")
            else:
                LOG.debug(f"Field '{key}' does not explicitly exist in the object. Adding it to the 'additional_data' field.")
                self.additional_data[key] = new_value

    def copy(self: T) -> T:
        """
        Return a deep copy of this model so callers never mutate stored state in place.

        Returns:
            A new, independent instance.
        """
        return copy.deepcopy(self)


@dataclass
class EquipmentModel(BaseDataModel):  # pylint: disable=too-many-instance-attributes
    """
    A dataclass to store a user-defined brewing device.

    Attributes:
        additional_data (Dict): For any extra data not explicitly defined.
        id (str): Globally unique and immutable once assigned. None until first saved.
        name (str): The display name; unique among equipment by convention.
        animation_type (AnimationType): Which built-in brewer animation to reuse. Unknown
            types read from storage are kept as plain strings.
        has_valve (bool): Whether the brewer has a valve (like a Clever dripper).
        is_custom (bool): Always True for stored equipment.
        description (str): Free-form description.
        note (str): Free-form note.
        custom_pour_animations (List[Dict]): Optional user-drawn pour animations.
    """

    id: Optional[str] = None  # pylint: disable=invalid-name
    name: str = None
    animation_type: AnimationType = AnimationType.CUSTOM
    has_valve: bool = False
    is_custom: bool = True
    description: str = None
    note: str = None
    custom_pour_animations: Optional[List[Dict]] = None

    json_aliases = {
        "animation_type": "animationType",
        "has_valve": "hasValve",
        "is_custom": "isCustom",
        "custom_pour_animations": "customPourAnimations",
    }

    def __post_init__(self):
        if self.animation_type is None:
            self.animation_type = AnimationType.CUSTOM
        elif not isinstance(self.animation_type, AnimationType):
            try:
                self.animation_type = AnimationType(self.animation_type)
            except ValueError:
                # Other app versions store types we don't animate (e.g. espresso); keep them verbatim
                LOG.debug(f"Keeping unknown animation type '{self.animation_type}' for equipment '{self.name}'.")

    @property
    def animation_name(self) -> str:
        """
        The animation type as stored, whether or not it is a known `AnimationType`.

        Returns:
            The animation type string (e.g. `v60`).
        """
        if isinstance(self.animation_type, AnimationType):
            return self.animation_type.value
        return str(self.animation_type)

    @property
    def fields_allowed_to_be_updated(self) -> List[str]:
        """
        Define the fields that are allowed to be updated for an `EquipmentModel` object.

        Returns:
            A list of fields that are allowed to be updated in this class.
        """
        return ["name", "animation_type", "has_valve", "description", "note", "custom_pour_animations"]


@dataclass
class MethodModel(BaseDataModel):
    """
    A dataclass to store a brewing recipe that belongs to one equipment.

    Attributes:
        additional_data (Dict): For any extra data not explicitly defined.
        id (str): Assigned on first write and never regenerated afterwards.
        name (str): The display name of the recipe.
        params (Dict): Dose, water, ratio, grind, temperature and the `stages` list.
        timestamp (int): Epoch milliseconds of the last edit, if known.
    """

    id: Optional[str] = None  # pylint: disable=invalid-name
    name: str = None
    params: Dict = field(default_factory=dict)
    timestamp: Optional[int] = None

    @property
    def stages(self) -> List[Dict]:
        """
        The timed stages of this recipe.

        Returns:
            The list of stage dictionaries (possibly empty).
        """
        if "stages" in self.params:
            return self.params["stages"]
        return self.additional_data.get("stages", [])

    @property
    def fields_allowed_to_be_updated(self) -> List[str]:
        """
        Define the fields that are allowed to be updated for a `MethodModel` object.

        Returns:
            A list of fields that are allowed to be updated in this class.
        """
        return ["name", "params", "timestamp"]


@dataclass
class CoffeeBeanModel(BaseDataModel):  # pylint: disable=too-many-instance-attributes
    """
    A dataclass to store one bag of coffee beans in the inventory.

    Attributes:
        additional_data (Dict): For any extra data not explicitly defined (origin, flavor, ...).
        id (str): The unique ID for the bean.
        name (str): The name of the bean.
        timestamp (int): Epoch milliseconds of the last modification.
        capacity (str): Bag size in grams, as entered.
        remaining (str): Grams left, as a formatted number.
        roast_level (str): Roast level label.
        bean_type (str): Either `espresso` or `filter`.
        overall_rating (float): Rating from 1 to 5, if rated.
    """

    id: str = None  # pylint: disable=invalid-name
    name: str = None
    timestamp: int = None
    capacity: str = None
    remaining: str = None
    roast_level: str = None
    bean_type: str = None
    overall_rating: float = None

    json_aliases = {
        "roast_level": "roastLevel",
        "bean_type": "beanType",
        "overall_rating": "overallRating",
    }

    @property
    def fields_allowed_to_be_updated(self) -> List[str]:
        """
        Define the fields that are allowed to be updated for a `CoffeeBeanModel` object.

        Returns:
            A list of fields that are allowed to be updated in this class.
        """
        return ["name", "timestamp", "capacity", "remaining", "roast_level", "bean_type", "overall_rating"]


@dataclass
class BrewingNoteModel(BaseDataModel):
    """
    A dataclass to store a tasting note written after a brew.

    Attributes:
        additional_data (Dict): For any extra data not explicitly defined (rating, taste, ...).
        id (str): The unique ID for the note.
        timestamp (int): Epoch milliseconds when the note was written.
        equipment (str): The equipment used.
        method (str): The method used.
        params (Dict): The brew parameters used.
    """

    id: str = None  # pylint: disable=invalid-name
    timestamp: int = None
    equipment: str = None
    method: str = None
    params: Dict = field(default_factory=dict)

    @property
    def fields_allowed_to_be_updated(self) -> List[str]:
        """
        Define the fields that are allowed to be updated for a `BrewingNoteModel` object.

        Returns:
            A list of fields that are allowed to be updated in this class.
        """
        return ["timestamp", "equipment", "method", "params"]
