"""
Built-in content for the editable pages. Stored page content is merged
over these values, so a page always renders even when nothing was saved.
"""

DEFAULT_HOMEPAGE_CONTENT = {
    'hero': {
        'title': 'Zapněte příběhy do své výuky.',
        'buttonText': 'Přejít na lekce',
        'buttonHref': '/lessons',
    },
    'features': {
        'sectionTitle': 'Platforma nabízí',
        'sectionDescription': (
            'Všechny materiály jsou připravené tak, abyste je mohli rovnou využít ve výuce – '
            'bez zbytečné administrativy nebo technických překážek.'
        ),
        'items': [
            {
                'title': 'Autentická videa pamětníků',
                'description': 'Přineste do třídy skutečné příběhy lidí, kteří zažili historické události na vlastní kůži.',
                'icon': '/illustrations/homepage/videa.png',
            },
            {
                'title': 'Lekce pro ZŠ i SŠ s různou délkou',
                'description': 'Lekce jsou připravené pro základní i střední školy ve variantách na 30, 45 i 90 minut.',
                'icon': '/illustrations/homepage/lekce_pro_zs.png',
            },
            {
                'title': 'Metodické a pracovní listy k úpravě',
                'description': 'Připravené materiály pro výuku, které si snadno upravíte a stáhnete jako PDF.',
                'icon': '/illustrations/homepage/pracovni_listy.png',
            },
        ],
    },
    'lessons': {
        'sectionTitle': 'Vybrané lekce pro vás',
        'sectionDescription': (
            'Pravidelně přidáváme nové materiály, které reagují na aktuální výuková témata.'
        ),
    },
    'testimonials': {
        'sectionTitle': 'Co o platformě říkají učitelé',
        'items': [],
    },
    'ticker': {
        'text': 'StoryOn přináší paměť národa.',
    },
}

DEFAULT_ABOUT_CONTENT = {
    'intro': {
        'pageTitle': 'O projektu',
        'sectionTitle': 'StoryOn',
        'paragraphs': [
            'StoryON je vzdělávací platforma s videi autentických výpovědí pamětníků '
            'a materiály přímo do výuky základních a středních škol.',
        ],
    },
    'principles': {
        'sectionTitle': 'Pedagogické principy a východiska',
        'items': [],
    },
    'projectTeam': {
        'sectionTitle': 'Projektový tým',
        'members': [],
    },
    'partners': {
        'sectionTitle': 'Kdo nám pomáhá projekt realizovat',
        'mainSponsor': None,
        'partners': [],
    },
}

DEFAULT_TERMS_CONTENT = {
    'pageTitle': 'Smluvní podmínky',
    'metaDescription': 'Všeobecné podmínky užívání a zásady ochrany osobních údajů portálu storyON.',
    'sections': [],
}

PAGE_DEFAULTS = {
    'homepage': DEFAULT_HOMEPAGE_CONTENT,
    'about': DEFAULT_ABOUT_CONTENT,
    'terms': DEFAULT_TERMS_CONTENT,
}
