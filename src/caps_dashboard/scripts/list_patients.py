"""
List the patient view as a given role would see it.
Run with:
    python -m caps_dashboard.scripts.list_patients --role coordenador --search "maria"
    python -m caps_dashboard.scripts.list_patients --role gestor_caps --caps "CAPS AD Centro" --hospital planalto
"""
import argparse
import logging
from caps_dashboard.core.db import get_engine
from caps_dashboard.core.logging_setup import setup_logging
from caps_dashboard.core.preferences import PreferenceStore
from caps_dashboard.services.hospital import HOSPITALS, HospitalSelector
from caps_dashboard.services.patients import load_indicators, load_patient_view
from caps_dashboard.services.permissions import ROLES, get_role_display_name
from caps_dashboard.transforms.indicators import format_decimal_br

COLUMNS = ["iniciais", "nome", "cns", "idade", "numero_internacoes", "caps_referencia", "data_admissao", "data_alta"]

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="List CAPS dashboard patients")
    p.add_argument("--role", choices=ROLES, required=True)
    p.add_argument("--caps", help="CAPS reference of the user (gestor_caps)")
    p.add_argument("--hospital", choices=HOSPITALS, help="switch the selected hospital")
    p.add_argument("--search", default="", help="name, initials or CNS")
    return p.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    log = logging.getLogger(__name__)

    engine = get_engine()
    selector = HospitalSelector(PreferenceStore())
    if args.hospital:
        selector.set_selected(args.hospital)

    log.info("Listing patients of %s as %s", selector.display_name(), get_role_display_name(args.role))
    view = load_patient_view(engine, selector, args.role, args.caps, term=args.search)
    stats = load_indicators(engine, selector, args.role, args.caps)

    print(f"{selector.display_name()} - {len(view)} patients\n")
    if not view.empty:
        print(view[COLUMNS].to_string(index=False))
    print()
    print(f"Average stay: {format_decimal_br(stats['media_permanencia'])} days")
    for key in ("reinternacao_7d", "reinternacao_15d", "reinternacao_30d"):
        print(f"{key}: {format_decimal_br(stats[key], 2)}%")

if __name__ == "__main__":
    setup_logging()
    main()
