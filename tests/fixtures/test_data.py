"""
Test data fixtures for the episode resolver tests.

Catalogue data mirrors the Bangumi API v0 JSON shapes so that the fake
metadata client parses it through the same entity constructors as the real
adapter.
"""

from typing import Any, Dict, List, Optional


def make_episode(
    episode_id: int,
    subject_id: int,
    sort: float,
    episode_type: int = 0,
    name: str = '',
    name_cn: str = '',
    airdate: str = '',
    ep: Optional[float] = None,
    desc: str = ''
) -> Dict[str, Any]:
    """Build a raw episode object as returned by /v0/episodes."""
    return {
        'id': episode_id,
        'subject_id': subject_id,
        'type': episode_type,
        'sort': sort,
        'ep': sort if ep is None and episode_type == 0 else (ep or 0),
        'name': name,
        'name_cn': name_cn,
        'airdate': airdate,
        'desc': desc,
        'duration': '00:24:00',
    }


def make_season(subject_id: int, count: int, first_sort: int = 1) -> List[Dict[str, Any]]:
    """Build a run of Normal episodes with ids derived from the subject id."""
    return [
        make_episode(
            episode_id=subject_id * 1000 + sort,
            subject_id=subject_id,
            sort=sort,
            name=f'Episode {sort}',
            airdate='2020-01-01'
        )
        for sort in range(first_sort, first_sort + count)
    ]


# ==================== White Album 2 ====================

WHITE_ALBUM_2_SUBJECT_ID = 69496
WHITE_ALBUM_2_FILENAME = 'White Album 2[01][Hi10p_1080p][BDRip][x264_2flac].mkv'

WHITE_ALBUM_2_SUBJECT = {
    'id': WHITE_ALBUM_2_SUBJECT_ID,
    'name': 'WHITE ALBUM2',
    'name_cn': '白色相簿2',
    'date': '2013-10-06',
    'eps': 13,
}

WHITE_ALBUM_2_EPISODES = [
    make_episode(
        episode_id=283700 + sort,
        subject_id=WHITE_ALBUM_2_SUBJECT_ID,
        sort=sort,
        name='WHITE ALBUM' if sort == 1 else f'Episode {sort}',
        name_cn='白色相簿' if sort == 1 else '',
        airdate=f'2013-10-{5 + sort:02d}' if sort < 5 else '2013-11-01'
    )
    for sort in range(1, 14)
] + [
    make_episode(
        episode_id=283800,
        subject_id=WHITE_ALBUM_2_SUBJECT_ID,
        sort=1,
        episode_type=1,
        name='',
        airdate='2014-03-01'
    ),
]


# ==================== Multi-season chain (restarting numbering) ====================

# Per-season counts [25, 22, 30]; cumulative bases [25, 47, 77]
SEASON_CHAIN_IDS = (1001, 1002, 1003)
SEASON_CHAIN_COUNTS = (25, 22, 30)

SEASON_CHAIN_SUBJECTS = {
    1001: {'id': 1001, 'name': 'Chain Season 1', 'date': '2018-04-01'},
    1002: {'id': 1002, 'name': 'Chain Season 2', 'date': '2019-04-01'},
    1003: {'id': 1003, 'name': 'Chain Season 3', 'date': '2020-04-01'},
}

SEASON_CHAIN_EPISODES = (
    make_season(1001, 25) + make_season(1002, 22) + make_season(1003, 30)
)

SEASON_CHAIN_RELATIONS = {
    1001: [
        {'id': 1101, 'relation': '番外篇', 'name': 'Chain OVA'},
        {'id': 1002, 'relation': '续集', 'name': 'Chain Season 2'},
    ],
    1002: [
        {'id': 1001, 'relation': '前传', 'name': 'Chain Season 1'},
        {'id': 1003, 'relation': '续集', 'name': 'Chain Season 3'},
        {'id': 1004, 'relation': '续集', 'name': 'Chain Season 3 (alt listing)'},
    ],
    1003: [
        {'id': 1002, 'relation': '前传', 'name': 'Chain Season 2'},
    ],
}


# ==================== Multi-season chain (continuous numbering) ====================

CONTINUOUS_CHAIN_SUBJECTS = {
    2001: {'id': 2001, 'name': 'Continuous Part 1'},
    2002: {'id': 2002, 'name': 'Continuous Part 2'},
}

CONTINUOUS_CHAIN_EPISODES = make_season(2001, 25) + make_season(2002, 22, first_sort=26)

CONTINUOUS_CHAIN_RELATIONS = {
    2001: [{'id': 2002, 'relation': 'Sequel', 'name': 'Continuous Part 2'}],
    2002: [],
}


# ==================== Cyclic relations ====================

CYCLE_SUBJECTS = {
    8001: {'id': 8001, 'name': 'Cycle A'},
    8002: {'id': 8002, 'name': 'Cycle B'},
}

CYCLE_EPISODES = make_season(8001, 12) + make_season(8002, 12)

CYCLE_RELATIONS = {
    8001: [{'id': 8002, 'relation': '续集', 'name': 'Cycle B'}],
    8002: [{'id': 8001, 'relation': '续集', 'name': 'Cycle A'}],
}


# ==================== Offset (Kimetsu no Yaiba, Entertainment District Arc) ====================

KIMETSU_SUBJECT_ID = 3001
KIMETSU_OFFSET = 26

KIMETSU_SUBJECT = {
    'id': KIMETSU_SUBJECT_ID,
    'name': '鬼滅の刃 遊郭編',
    'name_cn': '鬼灭之刃 游郭篇',
    'date': '2021-12-05',
}

KIMETSU_EPISODES = [
    make_episode(
        episode_id=3001000 + sort,
        subject_id=KIMETSU_SUBJECT_ID,
        sort=sort,
        name='音柱・宇髄天元' if sort == 1 else f'第{sort}話',
        name_cn='音柱・宇髓天元' if sort == 1 else '',
        airdate='2021-12-05'
    )
    for sort in range(1, 12)
]


# ==================== Duplicate order (Normal and Special share order 1) ====================

DUPLICATE_SUBJECT_ID = 4001

DUPLICATE_EPISODES = [
    make_episode(4001901, DUPLICATE_SUBJECT_ID, 1, episode_type=1, name='Special One'),
    make_episode(4001001, DUPLICATE_SUBJECT_ID, 1, episode_type=0, name='Normal One'),
    make_episode(4001002, DUPLICATE_SUBJECT_ID, 2, episode_type=0, name='Normal Two'),
]


# ==================== Cached episode id ====================

CACHED_SUBJECT_ID = 5001
CACHED_EPISODE_ID = 5001099
CACHED_DRIFTED_EPISODE_ID = 5001098

CACHED_EPISODES = make_season(CACHED_SUBJECT_ID, 4)

# Not part of the episode listing, only reachable by id
CACHED_EPISODES_BY_ID = {
    CACHED_EPISODE_ID: make_episode(
        CACHED_EPISODE_ID, CACHED_SUBJECT_ID, 5.05, name='Recap', airdate='2020-02-01'
    ),
    CACHED_DRIFTED_EPISODE_ID: make_episode(
        CACHED_DRIFTED_EPISODE_ID, CACHED_SUBJECT_ID, 7, name='Far Away'
    ),
}


# ==================== Specials ====================

SPECIALS_SUBJECT_ID = 6001

SPECIALS_SUBJECT = {
    'id': SPECIALS_SUBJECT_ID,
    'name': 'ガールズ&パンツァー 最終章',
    'name_cn': '少女与战车 最终章',
    'date': '2017-12-09',
}

SPECIALS_EPISODES = make_season(SPECIALS_SUBJECT_ID, 6) + [
    make_episode(6001901, SPECIALS_SUBJECT_ID, 1, episode_type=1, name='Special Lecture', airdate='2018-01-01'),
    make_episode(6001902, SPECIALS_SUBJECT_ID, 2, episode_type=1, name='', airdate='2017-01-01'),
    make_episode(6001801, SPECIALS_SUBJECT_ID, 1, episode_type=2, name='OP Theme'),
]

# Subject whose only "special" is filed as a Normal episode
UNTYPED_SPECIAL_SUBJECT_ID = 7001

UNTYPED_SPECIAL_EPISODES = [
    make_episode(7001001, UNTYPED_SPECIAL_SUBJECT_ID, 1, name='Movie'),
    make_episode(7001013, UNTYPED_SPECIAL_SUBJECT_ID, 13, name='OVA'),
]


# ==================== Aggregated catalogue ====================

ALL_SUBJECTS = {
    WHITE_ALBUM_2_SUBJECT_ID: WHITE_ALBUM_2_SUBJECT,
    KIMETSU_SUBJECT_ID: KIMETSU_SUBJECT,
    SPECIALS_SUBJECT_ID: SPECIALS_SUBJECT,
    DUPLICATE_SUBJECT_ID: {'id': DUPLICATE_SUBJECT_ID, 'name': 'Duplicates'},
    CACHED_SUBJECT_ID: {'id': CACHED_SUBJECT_ID, 'name': 'Cached', 'date': '2020-01-01'},
    UNTYPED_SPECIAL_SUBJECT_ID: {'id': UNTYPED_SPECIAL_SUBJECT_ID, 'name': 'Untyped'},
    **SEASON_CHAIN_SUBJECTS,
    **CONTINUOUS_CHAIN_SUBJECTS,
    **CYCLE_SUBJECTS,
}

ALL_EPISODES = (
    WHITE_ALBUM_2_EPISODES
    + SEASON_CHAIN_EPISODES
    + CONTINUOUS_CHAIN_EPISODES
    + CYCLE_EPISODES
    + KIMETSU_EPISODES
    + DUPLICATE_EPISODES
    + CACHED_EPISODES
    + SPECIALS_EPISODES
    + UNTYPED_SPECIAL_EPISODES
)

ALL_RELATIONS = {
    **SEASON_CHAIN_RELATIONS,
    **CONTINUOUS_CHAIN_RELATIONS,
    **CYCLE_RELATIONS,
}


# ==================== Filenames for classification ====================

# (filename, expected type name or None, expected raw token)
CLASSIFICATION_CASES = [
    ('Show - OP1 [1080p][AAC].mkv', 'OPENING', 'OP'),
    ('Show-OP1.mkv', 'OPENING', 'OP'),
    ('[VCB-Studio] Show [NCOP][Ma10p_1080p][x265_flac].mkv', 'OPENING', 'NCOP'),
    ('[VCB-Studio] Show [NCED02][Ma10p_1080p][x265_flac].mkv', 'ENDING', 'NCED'),
    ('[Group] Show [SP02][1080p].mkv', 'SPECIAL', 'SP'),
    ('[Group] Show OVA [BDRip 1080p].mkv', 'SPECIAL', 'OVA'),
    ('[Group] Show [PV][1080p].mkv', 'PREVIEW', 'PV'),
    (WHITE_ALBUM_2_FILENAME, None, None),
    ('[Group] Show - 05 [ABCD1234].mkv', None, None),
]
