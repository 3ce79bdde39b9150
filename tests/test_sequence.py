import threading

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from database import Base
from models import Sequence
from services.sequence import SequenceGenerator


def test_next_starts_counter_when_missing(in_memory_db):
    db = in_memory_db()
    seq = SequenceGenerator(db)
    assert [seq.next("Sponsor") for _ in range(3)] == [1, 2, 3]
    db.commit()
    assert db.get(Sequence, "Sponsor").last_value == 3
    db.close()


def test_counters_are_per_entity_type(in_memory_db):
    db = in_memory_db()
    seq = SequenceGenerator(db)
    assert seq.next("Orphan") == 1
    assert seq.next("Sponsor") == 1
    assert seq.next("Orphan") == 2
    db.close()


def test_rolled_back_numbers_are_reused(in_memory_db):
    db = in_memory_db()
    assert SequenceGenerator(db).next("Orphan") == 1
    db.rollback()
    assert SequenceGenerator(db).next("Orphan") == 1
    db.commit()
    assert SequenceGenerator(db).next("Orphan") == 2
    db.close()


def test_concurrent_callers_get_distinct_numbers(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'seq.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    with SessionLocal() as db:
        db.add(Sequence(entity_type="Orphan", last_value=0))
        db.commit()

    workers, per_worker = 8, 10
    results = []
    lock = threading.Lock()

    def work():
        for _ in range(per_worker):
            with SessionLocal() as db:
                value = SequenceGenerator(db).next("Orphan")
                db.commit()
            with lock:
                results.append(value)

    threads = [threading.Thread(target=work) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    engine.dispose()

    assert sorted(results) == list(range(1, workers * per_worker + 1))
