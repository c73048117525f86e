from autogram import main

main()
