from uniforge.core import DataModel


class CloudImage(DataModel):
    """Image as listed by a provider.

    Attributes:
        name: Display name.
        id: Provider native identifier.
        status: Provider status.
        created: Creation timestamp.
    """

    name: str
    id: str
    status: str
    created: str
