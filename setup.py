from setuptools import setup, find_packages

setup(
    name='lambda_archiver',
    version='0.1',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    python_requires='>=3.8',
    install_requires=[
        'Click',
        'PyYAML',
        'pydantic>=2',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-mock',
        ],
    },
    entry_points='''
        [console_scripts]
        lambda-archiver=lambda_archiver.cli:cli
    ''',
)
