from setuptools import setup, find_packages
from os.path import exists

setup(
    name='huifu-console',
    version='0.3.0',
    include_package_data=True,
    packages=find_packages(include=['huifu_console', 'huifu_console.*']),
    python_requires='>=3.8',
    description='web console for huifu payment system configs and wechat merchant binding',
    long_description=(open('README.rst').read() if exists('README.rst')
                      else ''),
    install_requires=list(open('requirements.txt').read().strip().split('\n')),
    extras_require={'test': ['pytest']},
    entry_points={
        'console_scripts': [
            'huifu-console = huifu_console.server:main',
        ],
    },
    zip_safe=False

)
