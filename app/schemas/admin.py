from pydantic import BaseModel


class SeedCatalogResponse(BaseModel):
    exercises_created: int
    achievements_created: int
    templates_created: int
    system_user_id: int
