class NotFoundError(Exception):
    """Entity is missing or belongs to another owner."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id
