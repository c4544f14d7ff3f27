# model/base.py
from sqlalchemy import Integer
from sqlalchemy.dialects.mysql import BIGINT as MyBIGINT
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# BIGINT UNSIGNED on MySQL; SQLite only autoincrements a plain INTEGER primary key
IdType = MyBIGINT(unsigned=True).with_variant(Integer, "sqlite")
