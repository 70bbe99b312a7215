from setuptools import setup, find_packages

setup(
    name='bookstore_toolbag',
    version='0.1.0',
    packages=find_packages(include=['bookstore_toolbag', 'bookstore_toolbag.*']),
    install_requires=[
        'python-dotenv',
        'pymongo',
        'motor',
        'pydantic>=2',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
        ],
    },
    entry_points={
        'console_scripts': [
            'bookstore-queries=bookstore_toolbag.demo:main',
        ],
    },
    include_package_data=True,
    python_requires='>=3.8',
    description='Async MongoDB query, aggregation and indexing helpers for the plp_bookstore books collection.',
)
