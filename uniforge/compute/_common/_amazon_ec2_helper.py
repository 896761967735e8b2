from typing import Any

from uniforge.config import Tag

OWNER_TAG_KEY = "CreatedBy"
OWNER_TAG_VALUE = "ops"
NAME_TAG_KEY = "Name"


def build_tags(tags: list[Tag], image_name: str) -> tuple[list[dict], str]:
    """Build EC2 tags for created resources.

    User tags are kept, a ``Name`` tag from the image name is added
    unless one is given, and the ownership tag is always added.

    Returns:
        EC2 tags and the effective name.
    """
    ec2_tags = []
    name = image_name
    name_specified = False
    for tag in tags:
        if tag.key == OWNER_TAG_KEY:
            continue
        ec2_tags.append({"Key": tag.key, "Value": tag.value})
        if tag.key == NAME_TAG_KEY:
            name_specified = True
            name = tag.value
    if not name_specified:
        ec2_tags.append({"Key": NAME_TAG_KEY, "Value": image_name})
    ec2_tags.append({"Key": OWNER_TAG_KEY, "Value": OWNER_TAG_VALUE})
    return ec2_tags, name


def owner_filter() -> dict:
    return {"Name": f"tag:{OWNER_TAG_KEY}", "Values": [OWNER_TAG_VALUE]}


def get_tag(resource: dict[str, Any], key: str) -> str | None:
    for tag in resource.get("Tags") or []:
        if tag.get("Key") == key:
            return tag.get("Value")
    return None


def is_owned(resource: dict[str, Any]) -> bool:
    return get_tag(resource, OWNER_TAG_KEY) == OWNER_TAG_VALUE


def get_snapshot_id(image: dict[str, Any]) -> str | None:
    for mapping in image.get("BlockDeviceMappings") or []:
        ebs = mapping.get("Ebs")
        if ebs and ebs.get("SnapshotId"):
            return ebs["SnapshotId"]
    return None
