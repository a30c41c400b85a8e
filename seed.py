from app import create_app
from models import db
from models.branch import Branch
from models.district import District
from services.bootstrap import bootstrap_reference_data


def run(with_demo: bool = False):
    app = create_app()
    with app.app_context():
        # ✅ Importante:
        # No usamos db.create_all() porque trabajamos con migraciones (Flask-Migrate).
        # Asegúrate de haber corrido: flask db upgrade

        # 1) Turnos, cuentas y usuario admin (solo si faltan)
        created = bootstrap_reference_data(db.session)

        # 2) Distrito + sucursal demo (opcional)
        if with_demo:
            district = db.session.query(District).filter_by(name="Central").first()
            if not district:
                district = District(name="Central")
                db.session.add(district)
                db.session.flush()

            branch = db.session.query(Branch).filter_by(name="Sucursal Central").first()
            if not branch:
                db.session.add(Branch(name="Sucursal Central", district_id=district.id, is_active=True))

            db.session.commit()

        print("✅ Seed listo.")
        print(f"Turnos: {created['turnos']} | Cuentas: {created['cuentas']} | Usuarios: {created['usuarios']}")


if __name__ == "__main__":
    import sys

    run(with_demo="--demo" in sys.argv)
