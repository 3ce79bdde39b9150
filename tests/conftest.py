import pytest
import sys
import os
# ensure project root is importable during pytest collection
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from database.seed import seed_all
import models
from models import OrphanList, Partner, Province
from repositories.db_repository import DBService


@pytest.fixture
def in_memory_db():
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SessionLocal = sessionmaker(bind=engine)
    Base.metadata.create_all(engine)
    session = SessionLocal()
    seed_all(session)
    session.close()
    yield SessionLocal
    engine.dispose()


@pytest.fixture
def db_service(in_memory_db):
    svc = DBService()
    svc.get_db = lambda: in_memory_db()
    return svc


@pytest.fixture
def orphan_list_id(in_memory_db):
    db = in_memory_db()
    province = db.query(Province).filter_by(code="KR").one()
    partner = Partner(name="Partner A", province=province)
    orphan_list = OrphanList(partner=partner, osra_num="KR0001", orphan_count=10, upload_date=date(2024, 1, 1))
    db.add(orphan_list)
    db.commit()
    list_id = orphan_list.id
    db.close()
    return list_id


@pytest.fixture
def province_id(in_memory_db):
    db = in_memory_db()
    pid = db.query(Province).filter_by(code="DA").one().id
    db.close()
    return pid


@pytest.fixture
def orphan_data(orphan_list_id, province_id):
    def address():
        return {"city": "Damascus", "neighborhood": "Mezzeh", "street": "Main St", "province_id": province_id}

    return {
        "name": "Ahmad",
        "father_name": "Yusuf",
        "father_is_martyr": True,
        "father_date_of_death": date(2020, 1, 1),
        "mother_name": "Fatima",
        "mother_alive": False,
        "date_of_birth": date(2019, 6, 15),
        "gender": "Male",
        "contact_number": "+963 11 555 0101",
        "sponsored_by_another_org": False,
        "minor_siblings_count": 2,
        "orphan_list_id": orphan_list_id,
        "original_address_attributes": address(),
        "current_address_attributes": address(),
    }
