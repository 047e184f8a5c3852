from setuptools import setup

import lrgen

setup(name='lrgen',
      version=lrgen.__version__,
      description='A pure python lexer generator and {LA,}LR(1) parser generator',
      author='Sebastian Riese',
      author_email='sebatian.riese.mail@web.de',
      packages=['lrgen', 'lrgen.runtime', 'lrgen.test'],
      license='MIT',
      python_requires='>=3.7',
      extras_require={'test': ['pytest']},
      entry_points={'console_scripts': ['lrgen = lrgen.__main__:main']},
      )
