#!/usr/bin/env python3
"""
Seed script to create the default dictionaries and scoring rubric
"""

import asyncio

DEFAULT_PROJECT_ID = "00000000-0000-0000-0000-000000000000"

# name -> (participant, phrases)
DICTIONARIES = {
    "lacking_info": ("employee", [
        "не могу ответить", "не могу помочь", "не могу сказать", "сложно сказать",
        "не знаю", "не помогу", "не подскажу", "не уверен", "не владею",
        "не обладаю", "нужно уточнить", "необходимо уточнить", "нужно проверить",
        "необходимо проверить",
    ]),
    "slurred_speech": ("client", [
        "громче можно", "чуть громче", "не расслышал", "громче говорите",
        "можете громче", "не услышал", "помедленнее говорите", "что вы говорите",
        "не пойму вас", "громче чуть", "можно громче", "помедленнее пожалуйста",
        "пожалуйста помедленнее", "не понимаю вас", "говорите громче",
        "не понимаю что вы говорите", "не пойму что вы говорите", "громче можете",
        "мычите под нос", "вы мямлите", "говорите медленнее", "невнятно говорите",
        "повторите еще раз", "повторите медленнее", "не разобрал", "я вас не понял",
        "что вы сказали", "можете говорить чётче", "сложно вас понять",
        "говорите слишком быстро",
    ]),
    "profanity_speech": ("employee", [
        "солнышко мое вставай", "ласковый и такой красивый",
    ]),
    "banned_words": ("employee", [
        "секундочку", "заказик", "минутку", "минуточку", "ладненько",
    ]),
    "filler_words": ("employee", [
        "на самом деле", "так скажем", "так сказать", "блин", "в общем то",
        "вообще то", "как бы", "короче", "честно говоря", "грубо говоря",
        "скажем так", "типа", "ну то есть", "ой ой ой", "это самое", "как его там",
        "ой я", "все такое", "дело в том что", "собственно", "типа того", "жесть",
        "и так далее", "ой ну", "собственно говоря", "походу", "как сказать",
        "в натуре", "как говорится", "ой извините", "ой это", "короче говоря",
    ]),
    "welcome_words": ("employee", [
        "здравствуйте", "добрый день", "добрый вечер", "доброе утро", "приветствую",
    ]),
    "introduction_words": ("employee", ["меня зовут"]),
    "presentation_words": ("employee", ["компания безлимит"]),
    "farewell_words": ("employee", [
        "всего доброго", "всего хорошего", "хорошего дня", "хорошего вечера",
        "до свидания", "до скорого", "до скорой",
    ]),
}

# (type, name, weight, [(dictionary name, contains)])
QUALITY_ITEMS = [
    ("speech_rate_ratio", "Соответствие темпа", 5, []),
    ("call_holds", "Отсутствие удержаний звонка", 15, []),
    ("silence_pauses", "Отсутствие пауз", 10, []),
    ("interruptions", "Отсутствие перебиваний", 15, []),
    ("lacking_info_dict", "Знание о продукте", 15, [("lacking_info", False)]),
    ("filler_words_dict", "Чистота речи", 10, [("filler_words", False)]),
    ("slurred_speech_dict", "Внятность речи", 15, [("slurred_speech", False)]),
    ("profanity_speech_dict", "Отсутствие запрещенных слов", 15, [("profanity_speech", False)]),
]

SCRIPT_ITEMS = [
    ("dictionary", "Приветствие", 25, [("welcome_words", True)]),
    ("dictionary", "Представление исполнителя", 25, [("introduction_words", True)]),
    ("dictionary", "Представление компании", 25, [("presentation_words", True)]),
    ("dictionary", "Прощание исполнителя", 25, [("farewell_words", True)]),
]


async def seed_defaults():
    """Seed default dictionaries and rubric of the default project"""
    import uuid

    from sqlalchemy import select

    from app.database import SessionLocal, engine, Base
    from app.models import (
        Dictionary,
        Phrase,
        Settings,
        SettingsItem,
        SettingsDictItem,
        SettingsKind,
        SettingsItemKind,
    )
    from app.schemas.recognition import ParticipantKind

    project_id = uuid.UUID(DEFAULT_PROJECT_ID)

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        result = await db.execute(
            select(Settings).where(Settings.project_id == project_id)
        )
        if result.scalars().first():
            print("Default settings already exist. Skipping...")
            return

        print("Creating default dictionaries...")

        dictionaries = {}
        for name, (participant, phrases) in DICTIONARIES.items():
            dictionary = Dictionary(name=name, participant=ParticipantKind(participant))
            db.add(dictionary)
            await db.flush()
            dictionaries[name] = dictionary

            for text in phrases:
                db.add(Phrase(dictionary_id=dictionary.id, text=text))

        print("Creating default rubric...")

        for kind, items, immutable in (
            (SettingsKind.QUALITY, QUALITY_ITEMS, True),
            (SettingsKind.SCRIPT, SCRIPT_ITEMS, False),
        ):
            settings = Settings(id=uuid.uuid4(), project_id=project_id, type=kind)
            db.add(settings)

            for item_type, name, weight, bindings in items:
                item = SettingsItem(
                    id=uuid.uuid4(),
                    settings_id=settings.id,
                    settings_immutable=immutable,
                    type=SettingsItemKind(item_type),
                    name=name,
                    score_weight=weight,
                )
                db.add(item)

                for dictionary_name, contains in bindings:
                    db.add(SettingsDictItem(
                        settings_item_id=item.id,
                        dictionary_id=dictionaries[dictionary_name].id,
                        contains=contains,
                    ))

        await db.commit()

        print(f"""
Default data created successfully!

Project: {project_id}
Dictionaries: {len(dictionaries)}
Quality items: {len(QUALITY_ITEMS)}
Script items: {len(SCRIPT_ITEMS)}
""")


if __name__ == "__main__":
    asyncio.run(seed_defaults())
