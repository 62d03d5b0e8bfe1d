from sqlmodel import Field, SQLModel


class StorageItem(SQLModel, table=True):
    __tablename__ = "storage_items"

    key: str = Field(primary_key=True)
    value: str = Field(default="")
