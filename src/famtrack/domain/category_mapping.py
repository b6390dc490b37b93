"""Default category catalog and legacy category ID mapping.

The default catalog uses fixed UUIDs so that imported data, prompts and the
legacy numeric IDs all point at the same rows on every installation.
"""

import re

from famtrack.domain.entities import EXPENSE, INCOME
from famtrack.domain.errors import ValidationError, invalid_category_id

PARENT_CATEGORIES = {
    "RECEITAS": "10000000-0000-0000-0000-000000000001",
    "MORADIA": "20000000-0000-0000-0000-000000000001",
    "TRANSPORTE": "20000000-0000-0000-0000-000000000002",
    "ALIMENTACAO": "20000000-0000-0000-0000-000000000003",
    "SAUDE": "20000000-0000-0000-0000-000000000004",
    "EDUCACAO": "20000000-0000-0000-0000-000000000005",
    "LAZER": "20000000-0000-0000-0000-000000000006",
    "STREAMING": "20000000-0000-0000-0000-000000000007",
    "TRIBUTOS": "20000000-0000-0000-0000-000000000008",
    "COMPRAS": "20000000-0000-0000-0000-000000000009",
    "OUTROS": "20000000-0000-0000-0000-000000000010",
}

SUBCATEGORIES = {
    # Receitas
    "SALARIO": "10000000-0000-0000-0000-000000000101",
    "FREELANCE": "10000000-0000-0000-0000-000000000102",
    "INVESTIMENTOS": "10000000-0000-0000-0000-000000000103",
    "BONIFICACOES": "10000000-0000-0000-0000-000000000104",
    "REEMBOLSOS": "10000000-0000-0000-0000-000000000105",
    "OUTRAS_RECEITAS": "10000000-0000-0000-0000-000000000106",
    # Moradia
    "HABITACAO": "20000000-0000-0000-0000-000000000101",
    "CONTAS_CONSUMO": "20000000-0000-0000-0000-000000000102",
    "MANUTENCAO_CASA": "20000000-0000-0000-0000-000000000103",
    "SMART_HOME": "20000000-0000-0000-0000-000000000104",
    "CASA_UTENSILIOS": "20000000-0000-0000-0000-000000000105",
    # Transporte
    "COMBUSTIVEL": "20000000-0000-0000-0000-000000000201",
    "MANUTENCAO_VEICULO": "20000000-0000-0000-0000-000000000202",
    "DOCUMENTACAO": "20000000-0000-0000-0000-000000000203",
    "URBANO": "20000000-0000-0000-0000-000000000204",
    "ACESSORIOS_VEICULO": "20000000-0000-0000-0000-000000000205",
    # Alimentação
    "SUPERMERCADO": "20000000-0000-0000-0000-000000000301",
    "ALIMENTACAO_FORA": "20000000-0000-0000-0000-000000000302",
    "PADARIA_FEIRA": "20000000-0000-0000-0000-000000000303",
    "SUPLEMENTACAO": "20000000-0000-0000-0000-000000000304",
    # Saúde
    "PLANO_SAUDE": "20000000-0000-0000-0000-000000000401",
    "FARMACIA": "20000000-0000-0000-0000-000000000402",
    "CONSULTAS_EXAMES": "20000000-0000-0000-0000-000000000403",
    "PROCEDIMENTOS": "20000000-0000-0000-0000-000000000404",
    "CUIDADOS_BEM_ESTAR": "20000000-0000-0000-0000-000000000405",
    # Educação
    "MENSALIDADE_ESCOLAR": "20000000-0000-0000-0000-000000000501",
    "CURSOS": "20000000-0000-0000-0000-000000000502",
    "LIVROS_MATERIAL": "20000000-0000-0000-0000-000000000503",
    # Lazer
    "VIAGENS_FERIAS": "20000000-0000-0000-0000-000000000601",
    "ENTRETENIMENTO": "20000000-0000-0000-0000-000000000602",
    "HOBBIES_CULTURA": "20000000-0000-0000-0000-000000000603",
    "VIDA_NOTURNA": "20000000-0000-0000-0000-000000000604",
    # Streaming e serviços
    "STREAMING_TV": "20000000-0000-0000-0000-000000000701",
    "MUSICA": "20000000-0000-0000-0000-000000000702",
    "CLOUD_STORAGE": "20000000-0000-0000-0000-000000000703",
    "INTELIGENCIA_ARTIFICIAL": "20000000-0000-0000-0000-000000000704",
    "GAMES": "20000000-0000-0000-0000-000000000705",
    # Tributos
    "IPVA": "20000000-0000-0000-0000-000000000801",
    "IPTU": "20000000-0000-0000-0000-000000000802",
    "IRPF": "20000000-0000-0000-0000-000000000803",
    "GANHO_CAPITAL": "20000000-0000-0000-0000-000000000804",
    "TAXAS_PROFISSIONAIS": "20000000-0000-0000-0000-000000000805",
    "MULTAS": "20000000-0000-0000-0000-000000000806",
    "SEGURO_INCENDIO": "20000000-0000-0000-0000-000000000807",
    "DEMAIS_TRIBUTOS": "20000000-0000-0000-0000-000000000808",
    # Compras
    "VESTUARIO": "20000000-0000-0000-0000-000000000901",
    "PRESENTES": "20000000-0000-0000-0000-000000000902",
    "ELETRONICOS": "20000000-0000-0000-0000-000000000903",
    "CUIDADOS_PESSOAIS": "20000000-0000-0000-0000-000000000904",
    # Outros
    "TAXAS_BANCARIAS": "20000000-0000-0000-0000-000000001001",
    "TRANSFERENCIAS": "20000000-0000-0000-0000-000000001002",
    "NAO_IDENTIFICADO": "20000000-0000-0000-0000-000000001003",
}

UNIDENTIFIED_CATEGORY_ID = SUBCATEGORIES["NAO_IDENTIFICADO"]

# (parent name, parent id, type, [(subcategory name, subcategory id), ...])
DEFAULT_CATEGORIES = [
    ("Receitas", PARENT_CATEGORIES["RECEITAS"], INCOME, [
        ("Salário", SUBCATEGORIES["SALARIO"]),
        ("Freelance", SUBCATEGORIES["FREELANCE"]),
        ("Investimentos", SUBCATEGORIES["INVESTIMENTOS"]),
        ("Bonificações", SUBCATEGORIES["BONIFICACOES"]),
        ("Reembolsos", SUBCATEGORIES["REEMBOLSOS"]),
        ("Outras Receitas", SUBCATEGORIES["OUTRAS_RECEITAS"]),
    ]),
    ("Moradia", PARENT_CATEGORIES["MORADIA"], EXPENSE, [
        ("Habitação", SUBCATEGORIES["HABITACAO"]),
        ("Contas de Consumo", SUBCATEGORIES["CONTAS_CONSUMO"]),
        ("Manutenção", SUBCATEGORIES["MANUTENCAO_CASA"]),
        ("Smart Home", SUBCATEGORIES["SMART_HOME"]),
        ("Casa e Utensílios", SUBCATEGORIES["CASA_UTENSILIOS"]),
    ]),
    ("Transporte", PARENT_CATEGORIES["TRANSPORTE"], EXPENSE, [
        ("Combustível", SUBCATEGORIES["COMBUSTIVEL"]),
        ("Manutenção Veicular", SUBCATEGORIES["MANUTENCAO_VEICULO"]),
        ("Documentação", SUBCATEGORIES["DOCUMENTACAO"]),
        ("Urbano", SUBCATEGORIES["URBANO"]),
        ("Acessórios Veículo", SUBCATEGORIES["ACESSORIOS_VEICULO"]),
    ]),
    ("Alimentação", PARENT_CATEGORIES["ALIMENTACAO"], EXPENSE, [
        ("Supermercado", SUBCATEGORIES["SUPERMERCADO"]),
        ("Alimentação Fora", SUBCATEGORIES["ALIMENTACAO_FORA"]),
        ("Padaria e Feira", SUBCATEGORIES["PADARIA_FEIRA"]),
        ("Suplementação", SUBCATEGORIES["SUPLEMENTACAO"]),
    ]),
    ("Saúde", PARENT_CATEGORIES["SAUDE"], EXPENSE, [
        ("Plano de Saúde", SUBCATEGORIES["PLANO_SAUDE"]),
        ("Farmácia", SUBCATEGORIES["FARMACIA"]),
        ("Consultas e Exames", SUBCATEGORIES["CONSULTAS_EXAMES"]),
        ("Procedimentos", SUBCATEGORIES["PROCEDIMENTOS"]),
        ("Cuidados e Bem-estar", SUBCATEGORIES["CUIDADOS_BEM_ESTAR"]),
    ]),
    ("Educação", PARENT_CATEGORIES["EDUCACAO"], EXPENSE, [
        ("Mensalidade Escolar", SUBCATEGORIES["MENSALIDADE_ESCOLAR"]),
        ("Cursos", SUBCATEGORIES["CURSOS"]),
        ("Livros e Material", SUBCATEGORIES["LIVROS_MATERIAL"]),
    ]),
    ("Lazer", PARENT_CATEGORIES["LAZER"], EXPENSE, [
        ("Viagens e Férias", SUBCATEGORIES["VIAGENS_FERIAS"]),
        ("Entretenimento", SUBCATEGORIES["ENTRETENIMENTO"]),
        ("Hobbies e Cultura", SUBCATEGORIES["HOBBIES_CULTURA"]),
        ("Vida Noturna", SUBCATEGORIES["VIDA_NOTURNA"]),
    ]),
    ("Streaming e Serviços", PARENT_CATEGORIES["STREAMING"], EXPENSE, [
        ("Streaming TV", SUBCATEGORIES["STREAMING_TV"]),
        ("Música", SUBCATEGORIES["MUSICA"]),
        ("Cloud e Storage", SUBCATEGORIES["CLOUD_STORAGE"]),
        ("Inteligência Artificial", SUBCATEGORIES["INTELIGENCIA_ARTIFICIAL"]),
        ("Games", SUBCATEGORIES["GAMES"]),
    ]),
    ("Tributos", PARENT_CATEGORIES["TRIBUTOS"], EXPENSE, [
        ("IPVA", SUBCATEGORIES["IPVA"]),
        ("IPTU", SUBCATEGORIES["IPTU"]),
        ("IRPF", SUBCATEGORIES["IRPF"]),
        ("Ganho de Capital", SUBCATEGORIES["GANHO_CAPITAL"]),
        ("Taxas Profissionais", SUBCATEGORIES["TAXAS_PROFISSIONAIS"]),
        ("Multas", SUBCATEGORIES["MULTAS"]),
        ("Seguro Incêndio", SUBCATEGORIES["SEGURO_INCENDIO"]),
        ("Demais Tributos", SUBCATEGORIES["DEMAIS_TRIBUTOS"]),
    ]),
    ("Compras", PARENT_CATEGORIES["COMPRAS"], EXPENSE, [
        ("Vestuário", SUBCATEGORIES["VESTUARIO"]),
        ("Presentes", SUBCATEGORIES["PRESENTES"]),
        ("Eletrônicos", SUBCATEGORIES["ELETRONICOS"]),
        ("Cuidados Pessoais", SUBCATEGORIES["CUIDADOS_PESSOAIS"]),
    ]),
    ("Outros", PARENT_CATEGORIES["OUTROS"], EXPENSE, [
        ("Taxas Bancárias", SUBCATEGORIES["TAXAS_BANCARIAS"]),
        ("Transferências", SUBCATEGORIES["TRANSFERENCIAS"]),
        ("Não Identificado", SUBCATEGORIES["NAO_IDENTIFICADO"]),
    ]),
]

# Numeric IDs from the first release, mapped to the closest subcategory
LEGACY_CATEGORY_ID_MAP = {
    "1": SUBCATEGORIES["SALARIO"],
    "2": SUBCATEGORIES["FREELANCE"],
    "3": SUBCATEGORIES["INVESTIMENTOS"],
    "4": SUBCATEGORIES["OUTRAS_RECEITAS"],
    "5": SUBCATEGORIES["SUPERMERCADO"],
    "6": SUBCATEGORIES["COMBUSTIVEL"],
    "7": SUBCATEGORIES["HABITACAO"],
    "8": SUBCATEGORIES["FARMACIA"],
    "9": SUBCATEGORIES["CURSOS"],
    "10": SUBCATEGORIES["ENTRETENIMENTO"],
    "11": SUBCATEGORIES["CONTAS_CONSUMO"],
    "12": SUBCATEGORIES["VESTUARIO"],
}

_UUID = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.I
)


def is_valid_uuid(value: str) -> bool:
    return bool(_UUID.match(value))


def map_category_id(category_id: str) -> str:
    """Return the canonical UUID for a category ID.

    UUIDs pass through unchanged; legacy IDs "1" to "12" map to their
    replacement subcategory.

    Raises:
        ValidationError: If the ID is neither
    """
    category_id = category_id.strip()
    if is_valid_uuid(category_id):
        return category_id
    if category_id in LEGACY_CATEGORY_ID_MAP:
        return LEGACY_CATEGORY_ID_MAP[category_id]
    raise ValidationError(invalid_category_id(category_id))

