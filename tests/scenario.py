"""Six-row dataset used by the end-to-end and plot tests.

- "Old" is released in 1999 and is removed by the year filter.
- Beta (missing critic score) and Gamma (user score 'tbd') share the
  (Action, PS2, 2001) group with one complete row, Alpha on PS2.
- Alpha is released on two platforms.
"""

import io

import pandas as pd

from loader import load_games

SCENARIO_CSV = """\
Name,Platform,Year_of_Release,Genre,Publisher,NA_Sales,EU_Sales,JP_Sales,Other_Sales,Global_Sales,Critic_Score,Critic_Count,User_Score,User_Count,Developer,Rating
Alpha,PS2,2001,Action,Pub A,1.0,0.6,0.2,0.2,2.0,80,10,8.0,100,Dev A,T
Beta,PS2,2001,Action,Pub B,0.5,0.3,0.1,0.1,1.0,,5,7.0,40,Dev B,T
Gamma,PS2,2001,Action,Pub B,0.3,0.1,0.05,0.05,0.5,70,6,tbd,,Dev B,E
Alpha,X360,2001,Action,Pub A,0.8,0.5,0.1,0.1,1.5,90,20,9.0,200,Dev A,T
Delta,X360,2001,Sports,Pub C,1.5,1.0,0.3,0.2,3.0,60,30,6.5,50,Dev C,E
Old,PS2,1999,Sports,Pub C,2.5,1.5,0.5,0.5,5.0,95,40,9.5,300,Dev C,E
"""


def scenario_games() -> pd.DataFrame:
    return load_games(io.StringIO(SCENARIO_CSV))
