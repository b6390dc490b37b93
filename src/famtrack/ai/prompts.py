"""Prompt builders for categorization and full-document extraction."""

from typing import Sequence

from famtrack.domain.entities import CREDIT_CARD, Category, ParsedTransaction
from famtrack.domain.category_mapping import UNIDENTIFIED_CATEGORY_ID

# Example merchant and description words per subcategory name
CATEGORY_KEYWORDS: dict[str, list[str]] = {
    # Receitas
    "Salário": ["salario", "folha", "pagamento", "holerite", "vencimento", "remuneracao",
                "proventos", "13o", "ferias", "adiantamento salarial"],
    "Freelance": ["freelance", "freela", "autonomo", "prestacao servico", "pj",
                  "nota fiscal", "nfs", "projeto"],
    "Investimentos": ["dividendo", "jcp", "rendimento", "juros", "proventos", "fii", "acao",
                      "cdb", "lci", "lca", "tesouro"],
    "Bonificações": ["bonus", "plr", "participacao lucros", "premio", "gratificacao",
                     "comissao"],
    "Reembolsos": ["reembolso", "estorno", "devolucao", "ressarcimento", "credito"],
    "Outras Receitas": ["venda", "presente", "transferencia recebida", "pix recebido",
                        "deposito"],
    # Moradia
    "Habitação": ["aluguel", "condominio", "prestacao imovel", "financiamento", "iptu",
                  "foro", "laudemio"],
    "Contas de Consumo": ["luz", "energia", "enel", "cemig", "copel", "eletropaulo", "agua",
                          "sanepar", "sabesp", "gas", "comgas", "internet", "net", "claro",
                          "vivo", "tim", "oi", "telefone"],
    "Manutenção": ["reparo", "conserto", "manutencao", "diarista", "faxina", "limpeza",
                   "jardineiro", "piscina", "reforma", "pedreiro", "eletricista",
                   "encanador"],
    "Smart Home": ["alexa", "google home", "robo aspirador", "roomba", "camera", "intelbras",
                   "automacao", "smart"],
    "Casa e Utensílios": ["decoracao", "moveis", "sofa", "cama", "mesa", "cadeira", "tapete",
                          "cortina", "eletrodomestico", "geladeira", "fogao", "microondas",
                          "liquidificador", "panela", "tok stok", "etna", "leroy merlin",
                          "telha norte"],
    # Transporte
    "Combustível": ["posto", "gasolina", "alcool", "etanol", "diesel", "gnv", "shell",
                    "petrobras", "ipiranga", "ale"],
    "Manutenção Veicular": ["oficina", "mecanico", "oleo", "pneu", "freio", "suspensao",
                            "alinhamento", "balanceamento", "revisao", "pecas"],
    "Documentação": ["licenciamento", "dpvat", "seguro auto", "seguro carro", "detran",
                     "transferencia veiculo", "ipva"],
    "Urbano": ["uber", "99", "cabify", "taxi", "onibus", "metro", "trem", "bilhete unico",
               "bom", "estacionamento", "zona azul", "estapar", "pedagio", "sem parar",
               "conectcar", "veloe"],
    "Acessórios Veículo": ["tapete carro", "acessorio", "capa banco", "som automotivo",
                           "multimidia", "gps"],
    # Alimentação
    "Supermercado": ["supermercado", "mercado", "extra", "pao de acucar", "carrefour",
                     "atacadao", "assai", "sams club", "costco", "big", "nacional", "zaffari",
                     "compras mes", "rancho", "higiene", "limpeza"],
    "Alimentação Fora": ["restaurante", "ifood", "rappi", "uber eats", "delivery",
                         "lanchonete", "fast food", "mcdonalds", "burger king", "outback",
                         "madero", "coco bambu", "bar", "boteco", "cafeteria", "starbucks"],
    "Padaria e Feira": ["padaria", "panificadora", "feira", "hortifruti", "sacolao",
                        "quitanda", "acougue", "peixaria"],
    "Suplementação": ["whey", "creatina", "vitamina", "suplemento", "growth",
                      "max titanium", "integralmedica", "optimum", "hipercalorico", "bcaa"],
    # Saúde
    "Plano de Saúde": ["unimed", "sulamerica", "bradesco saude", "amil", "hapvida",
                       "notre dame", "plano de saude", "convenio", "mensalidade plano"],
    "Farmácia": ["farmacia", "drogaria", "droga raia", "drogasil", "pacheco", "panvel",
                 "pague menos", "remedio", "medicamento", "vitamina", "cosmetico farmacia"],
    "Consultas e Exames": ["consulta", "medico", "exame", "laboratorio", "fleury", "dasa",
                           "lavoisier", "hermes pardini", "radiologia", "ultrassom",
                           "ressonancia", "tomografia"],
    "Procedimentos": ["cirurgia", "procedimento", "internacao", "hospital", "clinica",
                      "anestesia", "botox", "preenchimento", "lipo", "plastica"],
    "Cuidados e Bem-estar": ["academia", "smart fit", "bluefit", "bodytech", "personal",
                             "pilates", "yoga", "nutricionista", "nutri", "dermatologista",
                             "derma", "fisioterapia", "fisio", "massagem", "spa", "salao",
                             "cabelereiro", "barbearia", "manicure", "estetica"],
    # Educação
    "Mensalidade Escolar": ["escola", "colegio", "faculdade", "universidade",
                            "mensalidade escolar", "matricula", "uniforme",
                            "material escolar"],
    "Cursos": ["curso", "udemy", "alura", "rocketseat", "origamid", "workshop", "bootcamp",
               "mba", "pos graduacao", "especializacao", "ingles", "wizard", "fisk", "ccaa",
               "cultura inglesa"],
    "Livros e Material": ["livro", "livraria", "saraiva", "cultura", "amazon livro",
                          "kindle", "ebook", "apostila"],
    # Lazer
    "Viagens e Férias": ["hotel", "pousada", "airbnb", "booking", "decolar", "latam", "gol",
                         "azul", "passagem aerea", "hospedagem", "resort", "cruzeiro",
                         "pacote viagem", "turismo"],
    "Entretenimento": ["cinema", "cinemark", "cinepolis", "uci", "teatro", "show",
                       "ingresso", "sympla", "eventim", "parque", "museu", "evento",
                       "futebol", "jogo", "arena"],
    "Hobbies e Cultura": ["livro", "jogo", "game", "instrumento", "violao", "guitarra",
                          "piano", "teclado", "hobby", "arte", "pintura", "fotografia"],
    "Vida Noturna": ["bar", "pub", "balada", "festa", "boate", "club", "drinks", "cerveja",
                     "chopp", "vinho"],
    # Streaming e serviços
    "Streaming TV": ["netflix", "amazon prime", "prime video", "disney", "hbo", "max",
                     "apple tv", "paramount", "globoplay", "star+", "telecine", "streaming"],
    "Música": ["spotify", "apple music", "deezer", "youtube music", "tidal", "amazon music"],
    "Cloud e Storage": ["icloud", "google one", "google drive", "dropbox", "onedrive",
                        "microsoft 365", "office", "google workspace"],
    "Inteligência Artificial": ["chatgpt", "openai", "claude", "anthropic", "midjourney",
                                "copilot", "github copilot", "cursor", "notion ai"],
    "Games": ["playstation", "ps store", "xbox", "game pass", "nintendo", "steam",
              "epic games", "ubisoft", "ea play", "twitch"],
    # Tributos
    "IPVA": ["ipva"],
    "IPTU": ["iptu"],
    "IRPF": ["irpf", "imposto de renda", "darf", "receita federal"],
    "Ganho de Capital": ["gcap", "ganho capital", "lucro venda"],
    "Taxas Profissionais": ["oab", "cro", "crm", "crea", "crf", "anuidade",
                            "contribuicao sindical"],
    "Multas": ["multa", "infração", "auto infracao", "detran multa"],
    "Seguro Incêndio": ["seguro incendio", "seguro residencial"],
    "Demais Tributos": ["taxa", "imposto", "tributo", "contribuicao"],
    # Compras
    "Vestuário": ["roupa", "sapato", "tenis", "bolsa", "cinto", "acessorio moda", "renner",
                  "riachuelo", "c&a", "zara", "centauro", "netshoes", "nike", "adidas",
                  "puma"],
    "Presentes": ["presente", "aniversario", "natal", "dia das maes", "dia dos pais",
                  "casamento", "doacao", "gift"],
    "Eletrônicos": ["celular", "smartphone", "iphone", "samsung", "notebook", "computador",
                    "tablet", "ipad", "fone", "airpods", "teclado", "mouse", "monitor",
                    "magazineluiza", "magalu", "americanas", "casas bahia", "fast shop",
                    "kabum", "pichau", "terabyte"],
    "Cuidados Pessoais": ["perfume", "cosmetico", "maquiagem", "boticario", "natura", "avon",
                          "mac", "sephora", "oboticario"],
    # Outros
    "Taxas Bancárias": ["tarifa", "iof", "anuidade cartao", "taxa banco", "ted", "doc",
                        "manutencao conta", "saque", "pacote servicos"],
    "Transferências": ["transferencia", "pix enviado", "ted enviado", "pagamento"],
    "Não Identificado": [],
}

MAX_KEYWORDS = 8


def _keyword_hint(category: Category) -> str:
    keywords = CATEGORY_KEYWORDS.get(category.name, [])[:MAX_KEYWORDS]
    return ", ".join(keywords) or "outros"


def _prompt_categories(catalog: Sequence[Category]) -> list[Category]:
    """Subcategories only; a flat catalog is offered whole."""
    subcategories = [c for c in catalog if c.is_subcategory]
    return subcategories or list(catalog)


def build_categorization_prompt(
    transactions: Sequence[ParsedTransaction], catalog: Sequence[Category]
) -> str:
    """Prompt asking for one category id per transaction, in input order."""
    parents = {c.id: c.name for c in catalog if not c.is_subcategory}
    category_lines = []
    for category in _prompt_categories(catalog):
        parent = f" ({parents[category.parent_id]})" if category.parent_id in parents else ""
        category_lines.append(
            f"UUID: {category.id} | {category.name}{parent} | Tipo: {category.type} "
            f"| Keywords: {_keyword_hint(category)}"
        )

    transaction_lines = [
        f'{index}. "{txn.description}" | R$ {abs(txn.amount):.2f} | {txn.type}'
        for index, txn in enumerate(transactions)
    ]

    return f"""Você é um categorizador especialista em transações bancárias brasileiras.

SISTEMA DE CATEGORIAS HIERÁRQUICO:
- Existem CATEGORIAS PAI (ex: Moradia, Transporte, Alimentação)
- E SUBCATEGORIAS mais específicas (ex: Habitação, Combustível, Supermercado)
- Escolha APENAS entre as categorias listadas abaixo

CATEGORIAS DISPONÍVEIS (use SOMENTE os UUIDs abaixo):

{chr(10).join(category_lines)}

TRANSAÇÕES PARA CATEGORIZAR:

{chr(10).join(transaction_lines)}

REGRAS DE CATEGORIZAÇÃO:
1. Para cada transação, escolha o UUID da categoria mais apropriada
2. Use as keywords como guia para identificar padrões
3. Analise o nome do estabelecimento ou a descrição com cuidado
4. Considere o valor e o tipo (income/expense) para desempatar
5. Se não tiver certeza, use "Não Identificado" (UUID: {UNIDENTIFIED_CATEGORY_ID})
6. Retorne APENAS o JSON, sem markdown ou explicações

EXEMPLOS:
- "UBER *TRIP" → Urbano
- "PAG*JoseDaSilva" → Não Identificado
- "NETFLIX.COM" → Streaming TV
- "POSTO IPIRANGA" → Combustível
- "DROGASIL" → Farmácia

FORMATO DE RESPOSTA OBRIGATÓRIO (JSON puro):
{{"categories": ["uuid-da-transacao-0", "uuid-da-transacao-1"]}}

IMPORTANTE: o array "categories" DEVE ter exatamente {len(transactions)} elementos, \
um UUID por transação, na mesma ordem."""


CREDIT_CARD_RULES = """INSTRUÇÕES PARA FATURAS DE CARTÃO DE CRÉDITO:

1. IGNORE PAGAMENTOS DE FATURA: linhas com "PAGTO. POR DEB EM C/C", "PAGAMENTO" ou
   "DEB EM C/C" registram o pagamento da fatura anterior e NÃO são transações.
2. TIPO: todas as compras são "expense"; apenas estornos, devoluções, cashback e
   reembolsos são "income". Valores negativos na fatura costumam ser estornos.
3. PARCELAMENTOS: procure o padrão XX/YY no FINAL da descrição
   (ex: "AMAZON BR 01/03"). Se existir, mode "parcelada", installment_number XX e
   installments_total YY. Caso contrário, mode "avulsa" e ambos null.
4. CARTÃO E TITULAR: faturas com cartões adicionais separam as transações por cartão.
   Uma linha "Número do Cartão XXXX XXXX XXXX YYYY" seguida de "Total para NOME COMPLETO"
   abre a seção de um cartão. Todas as transações seguintes, até o próximo
   "Número do Cartão", têm card_last_digits "YYYY" e card_holder_name "NOME COMPLETO"
   (exatamente como no documento). Sem seção definida, use null em ambos."""

CHECKING_RULES = """INSTRUÇÕES PARA EXTRATOS DE CONTA CORRENTE:

1. TIPO:
   - PIX RECEBIDO, TED RECEBIDO, SALÁRIO, CRÉDITO, DEPÓSITO = income
   - PIX ENVIADO, TED ENVIADO, PAGAMENTO, DÉBITO, SAQUE, COMPRA = expense
   - ESTORNO, DEVOLUÇÃO, CASHBACK, REEMBOLSO = income
   - "PAGTO. POR DEB EM C/C" em conta corrente é uma despesa legítima
2. PIX, TED e DOC mantêm a direção do documento (enviado ou recebido).
3. "Pix recebido devolvido" é uma despesa."""


def build_extraction_prompt(
    text: str, statement_type: str, catalog: Sequence[Category]
) -> str:
    """Prompt asking the model to extract and categorize every transaction."""
    is_card = statement_type == CREDIT_CARD
    document = "FATURA DE CARTÃO DE CRÉDITO" if is_card else "EXTRATO DE CONTA CORRENTE"
    category_lines = "\n".join(
        f"- {c.id}: {c.name} ({c.type}) | Keywords: {_keyword_hint(c)}"
        for c in _prompt_categories(catalog)
    )

    return f"""Você é um especialista em extratos bancários e faturas de cartão brasileiros.

TIPO DE DOCUMENTO: {document}

{CREDIT_CARD_RULES if is_card else CHECKING_RULES}

REGRAS GERAIS:
- Extraia ABSOLUTAMENTE TODAS as transações do documento, inclusive valores pequenos,
  rendimentos, tarifas, IOF e taxas
- NÃO invente informações; seja preciso com valores e datas
- amount é sempre positivo; a direção fica em type
- Categorize cada transação pela descrição, variando as categorias conforme o caso
- Se não tiver certeza da categoria, use {UNIDENTIFIED_CATEGORY_ID}

CATEGORIAS DISPONÍVEIS:
{category_lines}

FORMATO DE SAÍDA (JSON puro):
{{
  "transactions": [
    {{
      "date": "YYYY-MM-DD",
      "description": "descrição original completa",
      "amount": 123.45,
      "type": "expense",
      "categoryId": "uuid-da-categoria",
      "mode": "avulsa",
      "installment_number": null,
      "installments_total": null,
      "card_last_digits": null,
      "card_holder_name": null
    }}
  ]
}}

Texto do documento ({len(text)} caracteres):
{text}"""
